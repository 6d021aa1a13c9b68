from typing import List, Optional

from sqlalchemy.orm import Session

from api.events.events_service import EventCatalog
from api.events.events_schema import EventFilter, EventRead
from api.events.event_registrations_controller import RegistrationController
from api.events.event_registrations_schema import MyRegistrationOut
from api.profiles.profiles_controller import get_profile
from api.profiles.profiles_schema import OrganizationProfileResponse

UPCOMING_PREVIEW = 6


def get_upcoming_events(db: Session, limit: int = UPCOMING_PREVIEW) -> List[EventRead]:
    return EventCatalog(db).list_upcoming(EventFilter(limit=limit))


def get_registered_events(db: Session, user_id: int) -> List[MyRegistrationOut]:
    return RegistrationController.list_mine(db, user_id)


def get_my_events(db: Session, user_id: int) -> List[EventRead]:
    return EventCatalog(db).list_owned_by(user_id)


def get_total_registrations(events: List[EventRead]) -> int:
    return sum(e.registration_count for e in events)


def get_org_profile(db: Session, user_id: int) -> Optional[OrganizationProfileResponse]:
    return get_profile(user_id, db).profile
