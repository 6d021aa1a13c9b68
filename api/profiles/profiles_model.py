# File: api/profiles/profiles_model.py

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from config.database import Base
from utils.time_utils import utcnow


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    full_name  = Column(String(150), nullable=False, default="")
    phone      = Column(String(20), nullable=True)
    university = Column(String(150), nullable=True)
    bio        = Column(String(500), nullable=True)
    interests  = Column(JSON, nullable=False, default=list)  # e.g. ["environment", "animals"]

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="student_profile")


class OrganizationProfile(Base):
    __tablename__ = "organization_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    org_name       = Column(String(200), nullable=False)
    contact_person = Column(String(150), nullable=True)
    contact_phone  = Column(String(20), nullable=True)
    contact_email  = Column(String(255), nullable=True)
    website        = Column(String(255), nullable=True)
    logo_ref       = Column(String(255), nullable=True)  # object-storage key, not the bytes
    description    = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="organization_profile")
