# api/user/user_model.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from config.database import Base
from utils.time_utils import utcnow


class User(Base):
    """An identity. Immutable once created; owns at most one role record."""
    __tablename__ = 'users'

    id         = Column(Integer, primary_key=True, index=True)
    email      = Column(String(255), nullable=False, unique=True, index=True)
    password   = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    role_record = relationship("UserRole", back_populates="user", uselist=False)
    student_profile = relationship("StudentProfile", back_populates="user", uselist=False)
    organization_profile = relationship("OrganizationProfile", back_populates="user", uselist=False)

    # events this user organizes
    organized_events = relationship(
        "Event",
        back_populates="owner",
        foreign_keys="[Event.owner_id]",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
