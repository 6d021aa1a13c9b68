"""
Tests for the request-time role gate and the dashboard redirects built on it.
"""
import pytest

from api.roles.roles_model import UserRole
from config.roles_config import Role
from middlewares.role_middleware import AccessGuard, Decision
from helpers.exceptions import PersistenceFailure
from conftest import make_user, auth_headers


class TestAuthorize:
    """Decision table of AccessGuard.authorize."""

    def test_anonymous_goes_to_required_login(self, db_session):
        guard = AccessGuard(db_session)

        volunteer_page = guard.authorize(None, Role.volunteer)
        org_page = guard.authorize(None, Role.organizer)

        assert volunteer_page.decision == Decision.redirect
        assert volunteer_page.redirect_to == "/auth/login"
        assert org_page.redirect_to == "/auth/org-login"
        assert volunteer_page.to_login

    def test_matching_role_allowed(self, db_session, volunteer, organizer):
        guard = AccessGuard(db_session)
        assert guard.authorize(volunteer.id, Role.volunteer).allowed
        assert guard.authorize(organizer.id, Role.organizer).allowed

    def test_other_role_goes_to_own_dashboard(self, db_session, volunteer, organizer):
        guard = AccessGuard(db_session)

        result = guard.authorize(volunteer.id, Role.organizer)
        assert result.decision == Decision.redirect
        assert result.redirect_to == "/dashboard"
        assert not result.to_login

        result = guard.authorize(organizer.id, Role.volunteer)
        assert result.redirect_to == "/org/dashboard"

    def test_missing_record_healed_as_volunteer(self, db_session):
        user = make_user(db_session, "norole@example.com")
        result = AccessGuard(db_session).authorize(user.id, Role.volunteer)

        assert result.allowed
        assert db_session.get(UserRole, user.id).role == Role.volunteer

    def test_resolution_failure_propagates(self, db_session, volunteer, monkeypatch):
        guard = AccessGuard(db_session)

        def broken(*args, **kwargs):
            raise PersistenceFailure()

        monkeypatch.setattr(guard.resolver, "resolve", broken)
        with pytest.raises(PersistenceFailure):
            guard.authorize(volunteer.id, Role.volunteer)


class TestDashboards:
    """Dashboard pages answer non-Allow decisions with 303."""

    def test_volunteer_dashboard_anonymous(self, client):
        resp = client.get("/api/dashboard", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/auth/login"

    def test_org_dashboard_anonymous(self, client):
        resp = client.get("/api/org/dashboard", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/auth/org-login"

    def test_volunteer_sent_away_from_org_dashboard(self, client, volunteer):
        resp = client.get("/api/org/dashboard", headers=auth_headers(volunteer), follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"

    def test_organizer_sent_away_from_volunteer_dashboard(self, client, organizer):
        resp = client.get("/api/dashboard", headers=auth_headers(organizer), follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/org/dashboard"

    def test_garbage_token_treated_as_anonymous(self, client):
        resp = client.get(
            "/api/dashboard",
            headers={"Authorization": "Bearer not-a-jwt"},
            follow_redirects=False,
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/auth/login"

    def test_volunteer_dashboard_content(self, client, volunteer, published_event):
        client.post(f"/api/events/{published_event.id}/registration", headers=auth_headers(volunteer))

        resp = client.get("/api/dashboard", headers=auth_headers(volunteer))
        assert resp.status_code == 200
        body = resp.json()
        assert [e["id"] for e in body["upcoming"]] == [str(published_event.id)]
        assert body["registrations"][0]["event"]["id"] == str(published_event.id)

    def test_org_dashboard_content(self, client, organizer, volunteer, second_volunteer, published_event):
        for user in (volunteer, second_volunteer):
            client.post(f"/api/events/{published_event.id}/registration", headers=auth_headers(user))

        resp = client.get("/api/org/dashboard", headers=auth_headers(organizer))
        assert resp.status_code == 200
        body = resp.json()
        assert body["profile"]["org_name"] == "Green Team"
        assert body["events"][0]["registration_count"] == 2
        assert body["total_registrations"] == 2


class TestApiGuard:
    """API routes raise instead of redirecting."""

    def test_anonymous_api_call(self, client, published_event):
        resp = client.post(f"/api/events/{published_event.id}/registration")
        assert resp.status_code == 401
        assert resp.json()["detail"]["code"] == "NotAuthenticated"
        assert resp.json()["detail"]["redirect_to"] == "/auth/login"

    def test_wrong_role_api_call(self, client, organizer, published_event):
        resp = client.post(f"/api/events/{published_event.id}/registration", headers=auth_headers(organizer))
        assert resp.status_code == 403
        detail = resp.json()["detail"]
        assert detail["code"] == "RoleMismatch"
        assert detail["redirect_to"] == "/org/dashboard"
