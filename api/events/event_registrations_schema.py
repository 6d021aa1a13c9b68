from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from api.events.events_schema import EventRead


class RegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: UUID
    user_id: int
    registered_at: datetime


class RegistrationResult(BaseModel):
    registration: RegistrationOut
    already_registered: bool = False
    registration_count: int


class UnregisterResult(BaseModel):
    removed: bool
    registration_count: int


class ProfileSnapshot(BaseModel):
    full_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    university: Optional[str] = None


class AttendeeOut(BaseModel):
    identity_id: int
    profile_snapshot: ProfileSnapshot
    registered_at: datetime


class MyRegistrationOut(BaseModel):
    registration: RegistrationOut
    event: EventRead


class AttendeeList(BaseModel):
    event_id: UUID
    total: int
    attendees: List[AttendeeOut]
