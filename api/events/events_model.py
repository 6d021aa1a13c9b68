import enum
import uuid

from sqlalchemy import (
    Column, String, Integer, Text, DateTime, Enum, ForeignKey, JSON, Uuid, CheckConstraint
)
from sqlalchemy.orm import relationship
from config.database import Base
from utils.time_utils import utcnow


class EventStatus(str, enum.Enum):
    draft     = "draft"
    published = "published"
    cancelled = "cancelled"


class EventCategory(str, enum.Enum):
    environment = "environment"
    education   = "education"
    community   = "community"
    health      = "health"
    animals     = "animals"
    arts        = "arts"
    sports      = "sports"
    other       = "other"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_events_capacity_positive"),
        CheckConstraint("end_time > start_time", name="ck_events_schedule_order"),
    )

    id          = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id    = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title       = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category    = Column(
        Enum(EventCategory, name="event_category_enum", native_enum=False, length=20),
        nullable=False, default=EventCategory.other,
    )
    location    = Column(String(255), nullable=False)
    start_time  = Column(DateTime, nullable=False, index=True)
    end_time    = Column(DateTime, nullable=False)
    capacity    = Column(Integer, nullable=False)
    status      = Column(
        Enum(EventStatus, name="event_status_enum", native_enum=False, length=20),
        nullable=False, default=EventStatus.draft, index=True,
    )
    tags        = Column(JSON, nullable=False, default=list)
    created_at  = Column(DateTime, default=utcnow, nullable=False)
    updated_at  = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="organized_events")
    registrations = relationship(
        "EventRegistration",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', status='{self.status.value}')>"
