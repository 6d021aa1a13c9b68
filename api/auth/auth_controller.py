import logging

from sqlalchemy.orm import Session

from api.auth.auth_schema import (
    Credentials,
    SignupRequest,
    OrgSignupRequest,
    SignupResponse,
    TokenResponse,
    MeResponse,
)
from api.auth.auth_service import IdentityGateway
from api.roles.roles_service import RoleResolver
from api.user.user_model import User
from config.roles_config import Role, EntryContext, ENTRY_ROLES, DASHBOARD_ROUTES
from helpers.exceptions import RoleMismatch, NotAuthenticated
from helpers.token_helper import create_user_token

logger = logging.getLogger(__name__)


def signup(req: SignupRequest, db: Session) -> SignupResponse:
    user_id = IdentityGateway(db).create_identity(req, Role.volunteer)
    return SignupResponse(user_id=user_id, role=Role.volunteer, message="Account created successfully!")


def org_signup(req: OrgSignupRequest, db: Session) -> SignupResponse:
    user_id = IdentityGateway(db).create_identity(req, Role.organizer)
    return SignupResponse(user_id=user_id, role=Role.organizer, message="Account created successfully!")


def login(credentials: Credentials, entry_context: EntryContext, db: Session) -> TokenResponse:
    """
    Authenticate, then resolve (and heal if needed) the role through the
    entry point used. Logging in through the other role's entry point is
    refused and pointed at the caller's own dashboard.
    """
    user_id = IdentityGateway(db).authenticate(credentials)
    record = RoleResolver(db).resolve(user_id, entry_context)

    if record.role != ENTRY_ROLES[entry_context]:
        logger.info(
            "cross-role login refused user_id=%s role=%s entry=%s",
            user_id, record.role.value, entry_context.value,
        )
        raise RoleMismatch(
            redirect_to=DASHBOARD_ROUTES[record.role],
            resolved_role=record.role.value,
        )

    return TokenResponse(
        access_token=create_user_token(user_id),
        user_id=user_id,
        role=record.role,
        redirect_to=DASHBOARD_ROUTES[record.role],
        message="Welcome back!",
    )


def me(user_id: int, db: Session) -> MeResponse:
    user = db.get(User, user_id)
    if user is None:
        raise NotAuthenticated()
    record = RoleResolver(db).resolve(user_id)
    return MeResponse(
        user_id=user.id,
        email=user.email,
        role=record.role,
        dashboard=DASHBOARD_ROUTES[record.role],
    )
