# File: api/profiles/profiles_schema.py

import re
from datetime import datetime
from typing import Optional, List, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, AnyHttpUrl, field_validator

from config.roles_config import Role

# Australian mobile, whitespace ignored
PHONE_PATTERN = re.compile(r"^(\+?61|0)?4\d{8}$")


def normalize_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return re.sub(r"\s", "", value)


def is_valid_phone(value: Optional[str]) -> bool:
    return bool(value) and PHONE_PATTERN.match(normalize_phone(value)) is not None


def _strip_markup(value: Optional[str]) -> Optional[str]:
    # angle brackets and script handlers never belong in profile text
    if value is None:
        return None
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"javascript:", "", value, flags=re.IGNORECASE)
    value = re.sub(r"on\w+\s*=", "", value, flags=re.IGNORECASE)
    return value.strip()


# ─── Volunteer ────────────────────────────────────────────────────────────────
class StudentProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = Field(None, min_length=1, max_length=150)
    phone: Optional[str] = Field(None, max_length=20)
    university: Optional[str] = Field(None, max_length=150)
    bio: Optional[str] = Field(None, max_length=500)
    interests: Optional[List[str]] = None

    @field_validator("full_name", "university", "bio")
    @classmethod
    def sanitize_text(cls, v):
        return _strip_markup(v)

    @field_validator("phone")
    @classmethod
    def clean_phone(cls, v):
        return normalize_phone(v)

    @field_validator("interests")
    @classmethod
    def clean_interests(cls, v):
        if v is None:
            return v
        seen = []
        for item in v:
            item = item.strip()
            if item and item not in seen:
                seen.append(item)
        return seen


class StudentProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    full_name: str
    phone: Optional[str] = None
    university: Optional[str] = None
    bio: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# ─── Organization ─────────────────────────────────────────────────────────────
class OrganizationProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    org_name: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_person: Optional[str] = Field(None, max_length=150)
    contact_phone: Optional[str] = Field(None, max_length=20)
    contact_email: Optional[EmailStr] = None
    website: Optional[AnyHttpUrl] = None
    logo_ref: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("org_name", "contact_person", "description")
    @classmethod
    def sanitize_text(cls, v):
        return _strip_markup(v)

    @field_validator("contact_phone")
    @classmethod
    def clean_phone(cls, v):
        return normalize_phone(v) or None

    @field_validator("website", mode="before")
    @classmethod
    def empty_website(cls, v):
        # empty string clears the optional field
        return v or None


class OrganizationProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    org_name: str
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    website: Optional[str] = None
    logo_ref: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileEnvelope(BaseModel):
    role: Role
    profile: Optional[Union[StudentProfileResponse, OrganizationProfileResponse]] = None
