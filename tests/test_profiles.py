"""
Tests for role-specific profiles and the profile edit boundary.
"""
import pytest

from api.profiles.profiles_model import StudentProfile, OrganizationProfile
from api.profiles.profiles_schema import is_valid_phone
from api.profiles.profiles_service import ProfileStore
from config.roles_config import Role
from helpers.exceptions import ProfileIncomplete
from conftest import make_user, auth_headers


@pytest.mark.parametrize("phone,valid", [
    ("0412345678", True),
    ("0412 345 678", True),
    ("+61412345678", True),
    ("61412345678", True),
    ("412345678", True),
    ("0212345678", False),
    ("041234567", False),
    ("", False),
    (None, False),
])
def test_phone_pattern(phone, valid):
    assert is_valid_phone(phone) is valid


class TestProfileStore:
    def test_get_by_role(self, db_session, volunteer, organizer):
        store = ProfileStore(db_session)
        assert isinstance(store.get(volunteer.id), StudentProfile)
        assert isinstance(store.get(organizer.id), OrganizationProfile)

    def test_upsert_creates_missing_profile(self, db_session):
        user = make_user(db_session, "late@uni.edu.au", Role.volunteer)
        db_session.query(StudentProfile).filter_by(user_id=user.id).delete()
        db_session.commit()

        profile = ProfileStore(db_session).upsert(user.id, {"full_name": "Late Comer", "phone": "0400000000"})

        assert profile.full_name == "Late Comer"
        assert db_session.query(StudentProfile).filter_by(user_id=user.id).count() == 1

    def test_upsert_patches_only_given_fields(self, db_session, volunteer):
        profile = ProfileStore(db_session).upsert(volunteer.id, {"bio": "Keen gardener"})
        assert profile.bio == "Keen gardener"
        assert profile.university == "UNSW"

    def test_volunteer_phone_required(self, db_session):
        user = make_user(db_session, "nophone@uni.edu.au", Role.volunteer)
        with pytest.raises(ProfileIncomplete):
            ProfileStore(db_session).upsert(user.id, {"bio": "hello"})

    def test_volunteer_phone_cleared(self, db_session, volunteer):
        with pytest.raises(ProfileIncomplete):
            ProfileStore(db_session).upsert(volunteer.id, {"phone": None})

    def test_organization_phone_optional(self, db_session, organizer):
        profile = ProfileStore(db_session).upsert(organizer.id, {"description": "Coastal care group"})
        assert profile.description == "Coastal care group"

    def test_organization_bad_phone(self, db_session, organizer):
        with pytest.raises(ProfileIncomplete):
            ProfileStore(db_session).upsert(organizer.id, {"contact_phone": "12345"})


class TestProfileApi:
    def test_read_profile(self, client, volunteer):
        resp = client.get("/api/profile", headers=auth_headers(volunteer))
        assert resp.status_code == 200
        body = resp.json()
        assert body["role"] == "volunteer"
        assert body["profile"]["full_name"] == "Alice Nguyen"

    def test_update_volunteer(self, client, volunteer):
        resp = client.put(
            "/api/profile",
            json={"phone": "0411 222 333", "interests": ["animals", " animals ", "arts"]},
            headers=auth_headers(volunteer),
        )
        assert resp.status_code == 200
        profile = resp.json()["profile"]
        assert profile["phone"] == "0411222333"
        assert profile["interests"] == ["animals", "arts"]

    def test_update_volunteer_invalid_phone(self, client, volunteer):
        resp = client.put("/api/profile", json={"phone": "555-1234"}, headers=auth_headers(volunteer))
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "ProfileIncomplete"

    def test_update_organization(self, client, organizer):
        resp = client.put(
            "/api/profile",
            json={"website": "https://greenteam.org", "contact_person": "Sam Lee"},
            headers=auth_headers(organizer),
        )
        assert resp.status_code == 200
        profile = resp.json()["profile"]
        assert profile["website"].startswith("https://greenteam.org")
        assert profile["contact_person"] == "Sam Lee"

    def test_update_organization_bad_website(self, client, organizer):
        resp = client.put("/api/profile", json={"website": "not a url"}, headers=auth_headers(organizer))
        assert resp.status_code == 422
        assert resp.json()["detail"]["errors"] == ["website"]

    def test_volunteer_cannot_send_org_fields(self, client, volunteer):
        resp = client.put("/api/profile", json={"org_name": "Mine"}, headers=auth_headers(volunteer))
        assert resp.status_code == 422

    def test_requires_login(self, client):
        assert client.get("/api/profile").status_code == 401
