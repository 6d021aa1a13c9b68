from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from config.database import Base
from utils.time_utils import utcnow


class EventRegistration(Base):
    __tablename__ = 'event_registrations'
    __table_args__ = (
        # Prevent duplicate registrations by the same user for the same event
        UniqueConstraint('event_id', 'user_id', name='uq_event_registration_event_user'),
    )

    id            = Column(Integer, primary_key=True, index=True)
    event_id      = Column(Uuid, ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id       = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    registered_at = Column(DateTime, default=utcnow, nullable=False)

    event = relationship("Event", back_populates="registrations")
    user  = relationship("User")
