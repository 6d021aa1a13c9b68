import logging
from datetime import datetime, timedelta, time
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, asc
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from api.events.events_model import Event, EventStatus
from api.events.event_registrations_model import EventRegistration
from api.events.events_schema import EventCreate, EventUpdate, EventRead, EventFilter, TimeWindow
from api.profiles.profiles_model import OrganizationProfile
from config.settings import settings
from helpers.event_signals import event_deleted
from helpers.exceptions import (
    EventNotFound,
    NotOwner,
    InvalidSchedule,
    ScheduleInPast,
    InvalidStatusTransition,
    PersistenceFailure,
)
from utils.cache_utils import cache_result
from utils.time_utils import utcnow

logger = logging.getLogger(__name__)

WINDOW_SPANS = {
    TimeWindow.week:  timedelta(days=7),
    TimeWindow.month: timedelta(days=30),
}


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def check_schedule(start_time: datetime, end_time: datetime, now: Optional[datetime] = None,
                   check_past: bool = True) -> None:
    if end_time <= start_time:
        raise InvalidSchedule()
    if check_past and start_time < (now or utcnow()):
        raise ScheduleInPast()


class EventCatalog:
    """Organizer-owned events and the public browse view over them."""

    def __init__(self, db: Session):
        self.db = db

    # ─── helpers ────────────────────────────────────────────────────────────────
    def _load(self, event_id: UUID) -> Event:
        try:
            event = self.db.get(Event, event_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("event lookup failed event_id=%s", event_id)
            raise PersistenceFailure()
        if not event:
            raise EventNotFound()
        return event

    def _load_owned(self, owner_id: int, event_id: UUID) -> Event:
        event = self._load(event_id)
        if event.owner_id != owner_id:
            logger.warning("owner check failed user_id=%s event_id=%s", owner_id, event_id)
            raise NotOwner()
        return event

    def _commit(self, event: Optional[Event] = None) -> None:
        try:
            self.db.commit()
            if event is not None:
                self.db.refresh(event)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("event write failed")
            raise PersistenceFailure()
        # any catalog write can change the tag cloud
        EventCatalog.list_tags.cache_clear()

    def _annotated_query(self):
        """Events joined with their live registration count and organization name."""
        counts = (
            self.db.query(
                EventRegistration.event_id.label("event_id"),
                func.count(EventRegistration.id).label("registration_count"),
            )
            .group_by(EventRegistration.event_id)
            .subquery()
        )
        return (
            self.db.query(
                Event,
                func.coalesce(counts.c.registration_count, 0),
                OrganizationProfile.org_name,
            )
            .outerjoin(counts, counts.c.event_id == Event.id)
            .outerjoin(OrganizationProfile, OrganizationProfile.user_id == Event.owner_id)
        )

    @staticmethod
    def _to_read(row: Tuple[Event, int, Optional[str]], is_registered: Optional[bool] = None) -> EventRead:
        event, count, org_name = row
        read = EventRead.model_validate(event)
        return read.model_copy(update={
            "registration_count": int(count or 0),
            "org_name": org_name,
            "is_registered": is_registered,
        })

    def _rows(self, query) -> list:
        try:
            return query.order_by(asc(Event.start_time), asc(Event.id)).all()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("event listing failed")
            raise PersistenceFailure()

    # ─── writes ─────────────────────────────────────────────────────────────────
    def create(self, owner_id: int, data: EventCreate, now: Optional[datetime] = None) -> Event:
        check_schedule(data.start_time, data.end_time, now)

        event = Event(
            owner_id    = owner_id,
            title       = data.title,
            description = data.description,
            category    = data.category,
            location    = data.location,
            start_time  = data.start_time,
            end_time    = data.end_time,
            capacity    = data.capacity or settings.DEFAULT_EVENT_CAPACITY,
            status      = data.status,
            tags        = data.tags,
        )
        self.db.add(event)
        self._commit(event)

        logger.info("event created event_id=%s owner_id=%s status=%s", event.id, owner_id, event.status.value)
        return event

    def update(self, owner_id: int, event_id: UUID, data: EventUpdate, now: Optional[datetime] = None) -> Event:
        event = self._load_owned(owner_id, event_id)
        changes = data.model_dump(exclude_unset=True)

        # nullable=False columns keep their value when null is sent
        changes = {k: v for k, v in changes.items() if v is not None or k == "description"}

        start = changes.get("start_time", event.start_time)
        end = changes.get("end_time", event.end_time)
        # an unchanged start may already be in the past
        check_schedule(start, end, now, check_past=start != event.start_time)

        for field, value in changes.items():
            setattr(event, field, value)
        self._commit(event)

        logger.info("event updated event_id=%s fields=%s", event_id, sorted(changes))
        return event

    def delete(self, owner_id: int, event_id: UUID) -> int:
        """Delete the event and all of its registrations. Returns how many registrations went with it."""
        event = self._load_owned(owner_id, event_id)
        try:
            removed = (
                self.db.query(EventRegistration)
                .filter(EventRegistration.event_id == event.id)
                .delete()
            )
            # rows are gone already; keep the ORM cascade from revisiting them
            self.db.expire(event, ["registrations"])
            self.db.delete(event)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("event delete failed event_id=%s", event_id)
            raise PersistenceFailure()
        self._commit()

        event_deleted.send(self, event_id=event_id, owner_id=owner_id, registrations_removed=removed)
        return removed

    def set_status(self, owner_id: int, event_id: UUID, status: EventStatus) -> Event:
        event = self._load_owned(owner_id, event_id)
        if event.status == EventStatus.cancelled or status == EventStatus.cancelled:
            raise InvalidStatusTransition()
        if event.status != status:
            event.status = status
            self._commit(event)
            logger.info("event status event_id=%s status=%s", event_id, status.value)
        return event

    def cancel(self, owner_id: int, event_id: UUID) -> Event:
        """Terminal. Existing registrations are kept for the record."""
        event = self._load_owned(owner_id, event_id)
        if event.status != EventStatus.cancelled:
            event.status = EventStatus.cancelled
            self._commit(event)
            logger.info("event cancelled event_id=%s", event_id)
        return event

    # ─── reads ──────────────────────────────────────────────────────────────────
    def list_upcoming(self, flt: Optional[EventFilter] = None, now: Optional[datetime] = None) -> List[EventRead]:
        flt = flt or EventFilter()
        now = now or utcnow()

        query = self._annotated_query().filter(
            Event.status == EventStatus.published,
            Event.start_time >= now,
        )

        if flt.search:
            term = _like(flt.search)
            query = query.filter(or_(
                Event.title.ilike(term, escape="\\"),
                Event.description.ilike(term, escape="\\"),
                OrganizationProfile.org_name.ilike(term, escape="\\"),
            ))

        if flt.location:
            query = query.filter(Event.location.ilike(_like(flt.location), escape="\\"))

        if flt.window == TimeWindow.today:
            next_midnight = datetime.combine(now.date() + timedelta(days=1), time.min)
            query = query.filter(Event.start_time < next_midnight)
        elif flt.window in WINDOW_SPANS:
            query = query.filter(Event.start_time <= now + WINDOW_SPANS[flt.window])

        rows = self._rows(query)

        # JSON arrays are not portably queryable, so tags match here
        if flt.tags:
            wanted = set(flt.tags)
            rows = [row for row in rows if wanted.intersection(row[0].tags or [])]

        return [self._to_read(row) for row in flt.slice(rows)]

    def list_owned_by(self, owner_id: int) -> List[EventRead]:
        rows = self._rows(self._annotated_query().filter(Event.owner_id == owner_id))
        return [self._to_read(row) for row in rows]

    def get(self, event_id: UUID, viewer_id: Optional[int] = None) -> EventRead:
        try:
            row = self._annotated_query().filter(Event.id == event_id).first()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("event lookup failed event_id=%s", event_id)
            raise PersistenceFailure()

        # drafts and cancelled events are visible to their owner only
        if not row or (row[0].status != EventStatus.published and row[0].owner_id != viewer_id):
            raise EventNotFound()

        is_registered = None
        if viewer_id is not None:
            is_registered = (
                self.db.query(EventRegistration.id)
                .filter(EventRegistration.event_id == event_id, EventRegistration.user_id == viewer_id)
                .first()
            ) is not None
        return self._to_read(row, is_registered)

    @cache_result(key_prefix="event_tags", skip_args=1)
    def list_tags(self) -> List[str]:
        """Distinct tags across upcoming published events."""
        try:
            tag_lists = (
                self.db.query(Event.tags)
                .filter(Event.status == EventStatus.published, Event.start_time >= utcnow())
                .all()
            )
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("tag listing failed")
            raise PersistenceFailure()
        return sorted({tag for (tags,) in tag_lists for tag in (tags or [])})
