from pydantic import ValidationError
from sqlalchemy.orm import Session

from api.profiles.profiles_schema import (
    ProfileEnvelope,
    StudentProfileUpdate,
    StudentProfileResponse,
    OrganizationProfileUpdate,
    OrganizationProfileResponse,
)
from api.profiles.profiles_service import ProfileStore
from config.roles_config import Role
from helpers.exceptions import ProfileIncomplete

RESPONSE_SCHEMAS = {
    Role.volunteer: StudentProfileResponse,
    Role.organizer: OrganizationProfileResponse,
}


def _envelope(role: Role, profile) -> ProfileEnvelope:
    if profile is None:
        return ProfileEnvelope(role=role, profile=None)
    return ProfileEnvelope(role=role, profile=RESPONSE_SCHEMAS[role].model_validate(profile))


def get_profile(user_id: int, db: Session) -> ProfileEnvelope:
    store = ProfileStore(db)
    role = store.role_of(user_id)
    return _envelope(role, store.get(user_id))


def update_profile(user_id: int, payload: dict, db: Session) -> ProfileEnvelope:
    store = ProfileStore(db)
    role = store.role_of(user_id)

    # the body shape depends on the caller's role, so validate here
    schema = StudentProfileUpdate if role == Role.volunteer else OrganizationProfileUpdate
    try:
        data = schema.model_validate(payload)
    except ValidationError as exc:
        raise ProfileIncomplete(errors=_error_fields(exc))

    fields = data.model_dump(exclude_unset=True)
    if fields.get("website") is not None:
        fields["website"] = str(fields["website"])
    if fields.get("contact_email") is not None:
        fields["contact_email"] = fields["contact_email"].lower()

    return _envelope(role, store.upsert(user_id, fields))


def _error_fields(exc: ValidationError) -> list:
    return [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
