import logging
from typing import Optional, Union

from passlib.context import CryptContext
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.user.user_model import User
from api.roles.roles_model import UserRole
from api.profiles.profiles_model import StudentProfile, OrganizationProfile
from api.auth.auth_schema import Credentials, SignupRequest, OrgSignupRequest
from config.roles_config import Role
from config.settings import settings
from helpers.exceptions import InvalidCredentials, IdentityExists, PersistenceFailure
from helpers.token_helper import decode_access_token

logger = logging.getLogger(__name__)

# Initialize password hashing context (bcrypt)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Hash the given password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify that the plain password matches the hashed password."""
    return pwd_context.verify(plain, hashed)


class IdentityGateway:
    """
    Boundary around credentials. Knows nothing about roles beyond writing
    the role hint given at signup.
    """

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, credentials: Credentials) -> int:
        user = self.db.query(User).filter(User.email == credentials.email.lower()).first()

        # missing user and wrong password look the same to the caller
        if not user or not verify_password(credentials.password, user.password):
            raise InvalidCredentials()
        return user.id

    def create_identity(self, request: Union[SignupRequest, OrgSignupRequest], role_hint: Role) -> int:
        """
        Create the user, its role record and an initial profile in one
        transaction. Rolls back completely if anything fails.
        """
        try:
            user = User(email=request.email.lower(), password=hash_password(request.password))
            self.db.add(user)
            # Make sure SQLAlchemy assigns us an ID
            self.db.flush()

            self.db.add(UserRole(user_id=user.id, role=role_hint))

            if role_hint == Role.organizer:
                self.db.add(OrganizationProfile(
                    user_id=user.id,
                    org_name=getattr(request, "org_name", None) or user.email,
                    contact_person=getattr(request, "contact_person", None),
                    contact_email=user.email,
                ))
            else:
                self.db.add(StudentProfile(
                    user_id=user.id,
                    full_name=getattr(request, "full_name", None) or "",
                    university=getattr(request, "university", None),
                    interests=[],
                ))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise IdentityExists()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("signup failed for role=%s", role_hint.value)
            raise PersistenceFailure()

        logger.info("identity created user_id=%s role=%s", user.id, role_hint.value)
        return user.id

    def current_identity(self, token: Optional[str]) -> Optional[int]:
        """Identity behind a bearer token, or None. No state kept between calls."""
        if not token:
            return None
        user_id = decode_access_token(token)
        if user_id is None:
            return None
        try:
            exists = self.db.query(User.id).filter(User.id == user_id).first()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("identity lookup failed")
            return None
        return user_id if exists else None
