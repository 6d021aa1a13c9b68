import logging
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import asc
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.events.events_model import Event, EventStatus
from api.events.event_registrations_model import EventRegistration
from api.events.event_registrations_schema import AttendeeOut, ProfileSnapshot
from api.profiles.profiles_model import StudentProfile
from api.user.user_model import User
from helpers.event_signals import registration_created, registration_removed
from helpers.exceptions import (
    NotAuthenticated,
    EventNotFound,
    EventNotPublished,
    EventClosed,
    AlreadyRegistered,
    NotOwner,
    PersistenceFailure,
)
from utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class RegistrationLedger:
    """
    Volunteer sign-ups for events. The (event, user) unique constraint is
    the only guard against duplicates; there is no capacity ceiling.
    """

    def __init__(self, db: Session):
        self.db = db

    def _find(self, volunteer_id: int, event_id: UUID) -> Optional[EventRegistration]:
        return (
            self.db.query(EventRegistration)
            .filter_by(event_id=event_id, user_id=volunteer_id)
            .first()
        )

    def _open_event(self, event_id: UUID, now: datetime) -> Event:
        event = self.db.get(Event, event_id)
        if not event:
            raise EventNotFound()
        if event.status != EventStatus.published:
            raise EventNotPublished()
        if event.start_time <= now:
            raise EventClosed()
        return event

    def register(self, volunteer_id: Optional[int], event_id: UUID,
                 now: Optional[datetime] = None) -> EventRegistration:
        if volunteer_id is None:
            raise NotAuthenticated()

        try:
            self._open_event(event_id, now or utcnow())
            existing = self._find(volunteer_id, event_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("registration lookup failed event_id=%s", event_id)
            raise PersistenceFailure()
        if existing:
            raise AlreadyRegistered(registration=existing)

        return self._insert(volunteer_id, event_id)

    def _insert(self, volunteer_id: int, event_id: UUID) -> EventRegistration:
        registration = EventRegistration(event_id=event_id, user_id=volunteer_id)
        self.db.add(registration)
        try:
            self.db.commit()
        except IntegrityError:
            # a concurrent request got there first; report its row
            self.db.rollback()
            winner = self._find(volunteer_id, event_id)
            if winner is None:
                logger.exception("registration insert failed event_id=%s", event_id)
                raise PersistenceFailure()
            raise AlreadyRegistered(registration=winner)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("registration insert failed event_id=%s", event_id)
            raise PersistenceFailure()

        self.db.refresh(registration)
        registration_created.send(self, user_id=volunteer_id, event_id=event_id)
        return registration

    def unregister(self, volunteer_id: Optional[int], event_id: UUID,
                   now: Optional[datetime] = None) -> bool:
        """
        Remove the caller's own registration. Returns False when there was
        none, including for events that no longer exist. Once the event has
        started the registration is part of the attendance record and stays.
        """
        if volunteer_id is None:
            raise NotAuthenticated()

        event = self._read(lambda: self.db.get(Event, event_id))
        if event is None:
            return False
        if event.start_time <= (now or utcnow()):
            raise EventClosed()

        try:
            removed = (
                self.db.query(EventRegistration)
                .filter_by(event_id=event_id, user_id=volunteer_id)
                .delete()
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("unregister failed event_id=%s", event_id)
            raise PersistenceFailure()

        if removed:
            registration_removed.send(self, user_id=volunteer_id, event_id=event_id)
        return bool(removed)

    def _read(self, query):
        try:
            return query()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("registration read failed")
            raise PersistenceFailure()

    def count_for(self, event_id: UUID) -> int:
        return self._read(lambda: self.db.query(EventRegistration).filter_by(event_id=event_id).count())

    def list_attendees(self, owner_id: int, event_id: UUID) -> List[AttendeeOut]:
        event = self._read(lambda: self.db.get(Event, event_id))
        if not event:
            raise EventNotFound()
        if event.owner_id != owner_id:
            raise NotOwner()

        rows: List[Tuple[EventRegistration, str, Optional[StudentProfile]]] = self._read(lambda: (
            self.db.query(EventRegistration, User.email, StudentProfile)
            .join(User, User.id == EventRegistration.user_id)
            .outerjoin(StudentProfile, StudentProfile.user_id == EventRegistration.user_id)
            .filter(EventRegistration.event_id == event_id)
            .order_by(asc(EventRegistration.registered_at), asc(EventRegistration.id))
            .all()
        ))
        return [
            AttendeeOut(
                identity_id=reg.user_id,
                registered_at=reg.registered_at,
                profile_snapshot=ProfileSnapshot(
                    full_name=profile.full_name if profile else None,
                    email=email,
                    phone=profile.phone if profile else None,
                    university=profile.university if profile else None,
                ),
            )
            for reg, email, profile in rows
        ]

    def list_for_volunteer(self, volunteer_id: int) -> List[Tuple[EventRegistration, Event]]:
        return self._read(lambda: (
            self.db.query(EventRegistration, Event)
            .join(Event, Event.id == EventRegistration.event_id)
            .filter(EventRegistration.user_id == volunteer_id)
            .order_by(asc(Event.start_time), asc(Event.id))
            .all()
        ))
