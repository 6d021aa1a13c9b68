# Controller
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from api.events.events_service import EventCatalog
from api.events.events_schema import EventCreate, EventUpdate, EventStatusUpdate, EventRead, EventFilter


class EventController:
    @staticmethod
    def _read(db: Session, event) -> EventRead:
        # fresh writes are returned with the same annotations as reads
        return EventController.get_event(event.id, db, event.owner_id)

    @staticmethod
    def create_event(payload: EventCreate, db: Session, owner_id: int) -> EventRead:
        event = EventCatalog(db).create(owner_id, payload)
        return EventController._read(db, event)

    @staticmethod
    def update_event(event_id: UUID, payload: EventUpdate, db: Session, owner_id: int) -> EventRead:
        event = EventCatalog(db).update(owner_id, event_id, payload)
        return EventController._read(db, event)

    @staticmethod
    def delete_event(event_id: UUID, db: Session, owner_id: int) -> dict:
        removed = EventCatalog(db).delete(owner_id, event_id)
        return {"deleted": True, "registrations_removed": removed}

    @staticmethod
    def set_status(event_id: UUID, payload: EventStatusUpdate, db: Session, owner_id: int) -> EventRead:
        event = EventCatalog(db).set_status(owner_id, event_id, payload.status)
        return EventController._read(db, event)

    @staticmethod
    def cancel_event(event_id: UUID, db: Session, owner_id: int) -> EventRead:
        event = EventCatalog(db).cancel(owner_id, event_id)
        return EventController._read(db, event)

    @staticmethod
    def list_events(db: Session, flt: EventFilter) -> List[EventRead]:
        return EventCatalog(db).list_upcoming(flt)

    @staticmethod
    def list_my_events(db: Session, owner_id: int) -> List[EventRead]:
        return EventCatalog(db).list_owned_by(owner_id)

    @staticmethod
    def list_tags(db: Session) -> List[str]:
        return EventCatalog(db).list_tags()

    @staticmethod
    def get_event(event_id: UUID, db: Session, viewer_id: int) -> EventRead:
        event = EventCatalog(db).get(event_id, viewer_id=viewer_id)
        if event.owner_id == viewer_id:
            event.is_registered = None
        return event

