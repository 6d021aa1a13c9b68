import logging
from typing import Any, Dict, Optional, Union

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.profiles.profiles_model import StudentProfile, OrganizationProfile
from api.profiles.profiles_schema import is_valid_phone
from api.roles.roles_service import RoleResolver
from api.user.user_model import User
from config.roles_config import Role
from helpers.exceptions import ProfileIncomplete, PersistenceFailure, NotAuthenticated

logger = logging.getLogger(__name__)

Profile = Union[StudentProfile, OrganizationProfile]

PROFILE_MODELS = {
    Role.volunteer: StudentProfile,
    Role.organizer: OrganizationProfile,
}


class ProfileStore:
    def __init__(self, db: Session):
        self.db = db
        self.resolver = RoleResolver(db)

    def _model_for(self, identity_id: int):
        record = self.resolver.resolve(identity_id)
        return record.role, PROFILE_MODELS[record.role]

    def _find(self, model, identity_id: int) -> Optional[Profile]:
        try:
            return self.db.query(model).filter(model.user_id == identity_id).first()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("profile lookup failed user_id=%s", identity_id)
            raise PersistenceFailure()

    def get(self, identity_id: int) -> Optional[Profile]:
        """Role-specific profile of the identity, or None when never created."""
        _, model = self._model_for(identity_id)
        return self._find(model, identity_id)

    def role_of(self, identity_id: int) -> Role:
        return self._model_for(identity_id)[0]

    def upsert(self, identity_id: int, fields: Dict[str, Any]) -> Profile:
        """
        Create or patch the caller's profile. Only keys present in `fields`
        are written. Volunteers must end up with a valid mobile number.
        """
        role, model = self._model_for(identity_id)
        profile = self._find(model, identity_id)
        self._check_required(role, profile, fields)

        if profile is None:
            profile = self._insert(role, model, identity_id, fields)
            if profile is not None:
                return profile
            # lost the insert race; patch the winner's row instead
            profile = self._find(model, identity_id)
            if profile is None:
                raise PersistenceFailure()

        for key, value in fields.items():
            setattr(profile, key, value)
        try:
            self.db.commit()
            self.db.refresh(profile)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("profile update failed user_id=%s", identity_id)
            raise PersistenceFailure()

        logger.info("profile updated user_id=%s fields=%s", identity_id, sorted(fields))
        return profile

    def _insert(self, role: Role, model, identity_id: int, fields: Dict[str, Any]) -> Optional[Profile]:
        values = dict(fields)
        if role == Role.organizer and not values.get("org_name"):
            user = self.db.get(User, identity_id)
            if user is None:
                raise NotAuthenticated()
            values["org_name"] = user.email
        if role == Role.volunteer:
            values.setdefault("full_name", "")
            values.setdefault("interests", [])

        profile = model(user_id=identity_id, **values)
        self.db.add(profile)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("profile insert failed user_id=%s", identity_id)
            raise PersistenceFailure()

        self.db.refresh(profile)
        logger.info("profile created user_id=%s role=%s", identity_id, role.value)
        return profile

    @staticmethod
    def _check_required(role: Role, profile: Optional[Profile], fields: Dict[str, Any]) -> None:
        if role == Role.volunteer:
            phone = fields["phone"] if "phone" in fields else getattr(profile, "phone", None)
            if not phone:
                raise ProfileIncomplete("A phone number is required", field="phone")
            if not is_valid_phone(phone):
                raise ProfileIncomplete("Please enter a valid Australian mobile number", field="phone")
        else:
            phone = fields.get("contact_phone")
            if phone and not is_valid_phone(phone):
                raise ProfileIncomplete("Please enter a valid Australian mobile number", field="contact_phone")
            if "org_name" in fields and not fields["org_name"]:
                raise ProfileIncomplete("Organization name is required", field="org_name")
