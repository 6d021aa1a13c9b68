# api/events/events_schema.py

from datetime import datetime
from enum import Enum
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.events.events_model import EventStatus, EventCategory
from utils.query_params import QueryParams
from utils.time_utils import to_naive_utc


def normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Trim, drop empties and duplicates, keep first-seen order."""
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


# ─── Enums ─────────────────────────────────────────────────────────────────────
class TimeWindow(str, Enum):
    today = "today"
    week  = "week"
    month = "month"
    all   = "all"


# ─── Create / Update ───────────────────────────────────────────────────────────
class EventCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: EventCategory = EventCategory.other
    location: str = Field(..., min_length=1, max_length=255)
    start_time: datetime
    end_time: datetime
    capacity: Optional[int] = Field(None, gt=0)
    status: EventStatus = EventStatus.published
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "location")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def as_utc(cls, v):
        return to_naive_utc(v)

    @field_validator("status")
    @classmethod
    def initial_status(cls, v):
        if v == EventStatus.cancelled:
            raise ValueError("new events are draft or published")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)


class EventUpdate(BaseModel):
    """Partial edit. Status changes go through the status/cancel endpoints."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[EventCategory] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    capacity: Optional[int] = Field(None, gt=0)
    tags: Optional[List[str]] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def as_utc(cls, v):
        return to_naive_utc(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)


class EventStatusUpdate(BaseModel):
    status: EventStatus

    @field_validator("status")
    @classmethod
    def no_cancel(cls, v):
        if v == EventStatus.cancelled:
            raise ValueError("use the cancel endpoint to cancel an event")
        return v


# ─── Read ──────────────────────────────────────────────────────────────────────
class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: int
    title: str
    description: Optional[str] = None
    category: EventCategory
    location: str
    start_time: datetime
    end_time: datetime
    capacity: int
    status: EventStatus
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    # extras
    registration_count: int = 0
    org_name: Optional[str] = None
    is_registered: Optional[bool] = None


# ─── Browse filter ─────────────────────────────────────────────────────────────
class EventFilter(QueryParams):
    search: Optional[str] = None
    location: Optional[str] = None
    window: TimeWindow = TimeWindow.all
    tags: List[str] = Field(default_factory=list)

    @field_validator("search", "location")
    @classmethod
    def blank_is_none(cls, v):
        if v is None:
            return None
        return v.strip() or None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        # ?tags=a,b and ?tags=a&tags=b are equivalent
        split = [part for tag in v for part in tag.split(",")]
        return normalize_tags(split)
