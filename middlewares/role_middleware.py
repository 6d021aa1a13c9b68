from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from api.roles.roles_service import RoleResolver
from config.database import get_db
from config.roles_config import Role, EntryContext, DASHBOARD_ROUTES, LOGIN_ROUTES
from helpers.exceptions import NotAuthenticated, RoleMismatch
from middlewares.auth_middleware import optional_identity


class Decision(str, Enum):
    allow    = "allow"
    redirect = "redirect"


@dataclass(frozen=True)
class AccessDecision:
    decision: Decision
    identity_id: Optional[int] = None
    role: Optional[Role] = None
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision == Decision.allow

    @property
    def to_login(self) -> bool:
        return self.decision == Decision.redirect and self.identity_id is None


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: Role


class AccessGuard:
    """Request-time gate for role-scoped resources. Holds no state between requests."""

    def __init__(self, db: Session):
        self.resolver = RoleResolver(db)

    def authorize(self, identity_id: Optional[int], required_role: Role) -> AccessDecision:
        if identity_id is None:
            return AccessDecision(Decision.redirect, redirect_to=LOGIN_ROUTES[required_role])

        # NotAuthenticated / PersistenceFailure propagate: fail closed
        record = self.resolver.resolve(identity_id, EntryContext.standard)
        if record.role == required_role:
            return AccessDecision(Decision.allow, identity_id=identity_id, role=record.role)

        return AccessDecision(
            Decision.redirect,
            identity_id=identity_id,
            role=record.role,
            redirect_to=DASHBOARD_ROUTES[record.role],
        )


def access_decision(required_role: Role):
    """Dependency returning the raw decision, for pages that redirect."""
    def dependency(
        identity_id: Optional[int] = Depends(optional_identity),
        db: Session = Depends(get_db),
    ) -> AccessDecision:
        # PersistenceFailure is not caught here: an outage answers 503, not a login redirect
        try:
            return AccessGuard(db).authorize(identity_id, required_role)
        except NotAuthenticated:
            return AccessDecision(Decision.redirect, redirect_to=LOGIN_ROUTES[required_role])

    return dependency


def role_middleware(required_role: Role):
    """Dependency for API routes: returns the CurrentUser or raises."""
    def dependency(
        identity_id: Optional[int] = Depends(optional_identity),
        db: Session = Depends(get_db),
    ) -> CurrentUser:
        try:
            result = AccessGuard(db).authorize(identity_id, required_role)
        except NotAuthenticated:
            raise NotAuthenticated(redirect_to=LOGIN_ROUTES[required_role])

        if result.allowed:
            return CurrentUser(id=result.identity_id, role=result.role)
        if result.to_login:
            raise NotAuthenticated(redirect_to=result.redirect_to)
        raise RoleMismatch(redirect_to=result.redirect_to, resolved_role=result.role.value)

    return dependency
