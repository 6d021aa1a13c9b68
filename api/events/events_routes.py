from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.database import get_db
from config.roles_config import Role
from middlewares.auth_middleware import auth_middleware
from middlewares.role_middleware import role_middleware, CurrentUser
from api.events.events_controller import EventController
from api.events.events_schema import (
    EventCreate,
    EventUpdate,
    EventStatusUpdate,
    EventRead,
    EventFilter,
    TimeWindow,
)
from utils.query_params import QueryParams, query_params

router = APIRouter(prefix="/events", tags=["events"])

organizer_only = role_middleware(Role.organizer)


def event_filter(
    search: Optional[str] = Query(None, max_length=200),
    location: Optional[str] = Query(None, max_length=255),
    window: TimeWindow = Query(TimeWindow.all),
    tags: List[str] = Query([]),
    params: QueryParams = Depends(query_params),
) -> EventFilter:
    return EventFilter(
        search=search,
        location=location,
        window=window,
        tags=tags,
        limit=params.limit,
        offset=params.offset,
    )


# ─── Organizer ─────────────────────────────────────────────────────────────────
@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    return EventController.create_event(payload, db, current_user.id)


@router.get(
    "/mine",
    response_model=List[EventRead],
    summary="Every event the current organization owns, any status",
)
def list_my_events(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    return EventController.list_my_events(db, current_user.id)


# ─── Browse (any signed-in user) ───────────────────────────────────────────────
@router.get("", response_model=List[EventRead], summary="Upcoming published events")
def list_events(
    flt: EventFilter = Depends(event_filter),
    db: Session = Depends(get_db),
    user_id: int = Depends(auth_middleware),
):
    return EventController.list_events(db, flt)


@router.get("/tags", response_model=List[str])
def list_tags(db: Session = Depends(get_db), user_id: int = Depends(auth_middleware)):
    return EventController.list_tags(db)


@router.get("/{event_id}", response_model=EventRead)
def get_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    user_id: int = Depends(auth_middleware),
):
    return EventController.get_event(event_id, db, user_id)


# ─── Organizer (by id) ─────────────────────────────────────────────────────────
@router.put("/{event_id}", response_model=EventRead)
def update_event(
    event_id: UUID,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    return EventController.update_event(event_id, payload, db, current_user.id)


@router.delete("/{event_id}")
def delete_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    """Deletes the event together with its registrations."""
    return EventController.delete_event(event_id, db, current_user.id)


@router.patch("/{event_id}/status", response_model=EventRead)
def set_event_status(
    event_id: UUID,
    payload: EventStatusUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    return EventController.set_status(event_id, payload, db, current_user.id)


@router.post("/{event_id}/cancel", response_model=EventRead)
def cancel_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(organizer_only),
):
    return EventController.cancel_event(event_id, db, current_user.id)
