"""
Domain errors with a stable machine-readable code.

Every error is an HTTPException so FastAPI renders it as
{"detail": {"code": ..., "message": ..., **extra}} without extra handlers.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainError(HTTPException):
    code: str = "DomainError"
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Operation rejected"

    def __init__(
        self,
        message: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **extra: Any,
    ):
        self.message = message or self.default_message
        self.extra = extra
        detail = {"code": self.code, "message": self.message, **extra}
        super().__init__(status_code=self.status_code_default, detail=detail, headers=headers)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class NotAuthenticated(DomainError):
    code = "NotAuthenticated"
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_message = "Please login to continue"

    def __init__(self, message: Optional[str] = None, redirect_to: Optional[str] = None):
        extra = {"redirect_to": redirect_to} if redirect_to else {}
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"}, **extra)
        self.redirect_to = redirect_to


class InvalidCredentials(DomainError):
    code = "InvalidCredentials"
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_message = "Email or password incorrect"


class IdentityExists(DomainError):
    code = "IdentityExists"
    status_code_default = status.HTTP_409_CONFLICT
    default_message = "An account with this email already exists"


class NotOwner(DomainError):
    code = "NotOwner"
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to perform this action"


class RoleMismatch(DomainError):
    code = "RoleMismatch"
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "This area belongs to a different account type"

    def __init__(self, redirect_to: str, resolved_role: str, message: Optional[str] = None):
        super().__init__(message, redirect_to=redirect_to, role=resolved_role)
        self.redirect_to = redirect_to
        self.resolved_role = resolved_role


class AlreadyRegistered(DomainError):
    code = "AlreadyRegistered"
    status_code_default = status.HTTP_409_CONFLICT
    default_message = "Already registered for this event"

    def __init__(self, registration=None, message: Optional[str] = None):
        super().__init__(message)
        self.registration = registration


class EventNotFound(DomainError):
    code = "EventNotFound"
    status_code_default = status.HTTP_404_NOT_FOUND
    default_message = "Event not found"


class EventNotPublished(EventNotFound):
    code = "EventNotPublished"
    default_message = "Event is not open for registration"


class EventClosed(EventNotFound):
    code = "EventClosed"
    default_message = "Event has already started"


class InvalidSchedule(DomainError):
    code = "InvalidSchedule"
    status_code_default = 422
    default_message = "End time must be after start time"


class ScheduleInPast(DomainError):
    code = "ScheduleInPast"
    status_code_default = 422
    default_message = "Start time cannot be in the past"


class InvalidStatusTransition(DomainError):
    code = "InvalidStatusTransition"
    status_code_default = status.HTTP_409_CONFLICT
    default_message = "Cancelled events cannot change status"


class ProfileIncomplete(DomainError):
    code = "ProfileIncomplete"
    status_code_default = 422
    default_message = "Profile is missing required information"


class PersistenceFailure(DomainError):
    code = "PersistenceFailure"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database unavailable. Please retry."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"Retry-After": "5"}, retryable=True)
