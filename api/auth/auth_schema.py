import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from config.roles_config import Role
from config.settings import settings


# ----- Login -----
class Credentials(BaseModel):
    email: EmailStr = Field(..., description="Registered email")
    password: str = Field(..., min_length=1, description="Account password")

    model_config = ConfigDict(extra="forbid")


# ----- Signup -----
class _SignupBase(Credentials):
    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        errors = []
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            errors.append(f"at least {settings.MIN_PASSWORD_LENGTH} characters")
        if not re.search(r"[A-Z]", v):
            errors.append("one uppercase letter")
        if not re.search(r"[a-z]", v):
            errors.append("one lowercase letter")
        if not re.search(r"[0-9]", v):
            errors.append("one number")
        if errors:
            raise ValueError("Password must contain " + ", ".join(errors))
        return v


class SignupRequest(_SignupBase):
    full_name: str = Field(..., min_length=1, max_length=150)
    university: Optional[str] = Field(None, max_length=150)


class OrgSignupRequest(_SignupBase):
    org_name: str = Field(..., min_length=1, max_length=200)
    contact_person: Optional[str] = Field(None, max_length=150)


# ----- Responses -----
class SignupResponse(BaseModel):
    user_id: int
    role: Role
    message: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: Role
    redirect_to: str
    message: str


class MeResponse(BaseModel):
    user_id: int
    email: EmailStr
    role: Role
    dashboard: str
