from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from config.roles_config import Role
from middlewares.role_middleware import role_middleware, CurrentUser
from api.events.event_registrations_controller import RegistrationController
from api.events.event_registrations_schema import (
    RegistrationResult,
    UnregisterResult,
    AttendeeList,
    MyRegistrationOut,
)

router = APIRouter(tags=["registrations"])

volunteer_only = role_middleware(Role.volunteer)
organizer_only = role_middleware(Role.organizer)


@router.post("/events/{event_id}/registration", response_model=RegistrationResult)
def register(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(volunteer_only),
):
    """Sign up for an event. Repeating the call returns the existing registration."""
    return RegistrationController.register(event_id, db, current_user.id)


@router.delete("/events/{event_id}/registration", response_model=UnregisterResult)
def unregister(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(volunteer_only),
):
    return RegistrationController.unregister(event_id, db, current_user.id)


@router.get("/events/{event_id}/attendees", response_model=AttendeeList)
def list_attendees(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    return RegistrationController.list_attendees(event_id, db, current_user.id)


@router.get(
    "/registrations/mine",
    response_model=List[MyRegistrationOut],
    summary="Events the current volunteer has signed up for",
)
def list_my_registrations(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(volunteer_only),
):
    return RegistrationController.list_mine(db, current_user.id)
