"""Pytest configuration and shared fixtures."""
import os

# settings are read once at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("ENVIRONMENT", "development")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, get_db, enable_sqlite_foreign_keys
from config.roles_config import Role
from api.auth.auth_service import hash_password
from api.user.user_model import User
from api.roles.roles_model import UserRole
from api.profiles.profiles_model import StudentProfile, OrganizationProfile
from api.events.events_model import Event, EventStatus
from helpers.token_helper import create_user_token
from utils.time_utils import utcnow
import models.index  # noqa: F401

PASSWORD = "Volunteer1"


@pytest.fixture
def engine():
    """One in-memory database per test, shared by every session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ─── Factories ─────────────────────────────────────────────────────────────────
def make_user(db, email, role=None, password=PASSWORD, **profile):
    """
    Insert an identity directly. With role=None no role record or profile is
    written, which is the state self-healing exists for.
    """
    user = User(email=email, password=hash_password(password))
    db.add(user)
    db.flush()
    if role is not None:
        db.add(UserRole(user_id=user.id, role=role))
    if role == Role.volunteer:
        db.add(StudentProfile(
            user_id=user.id,
            full_name=profile.get("full_name", email.split("@")[0].title()),
            phone=profile.get("phone"),
            university=profile.get("university"),
            interests=[],
        ))
    elif role == Role.organizer:
        db.add(OrganizationProfile(
            user_id=user.id,
            org_name=profile.get("org_name", email.split("@")[1]),
            contact_email=email,
        ))
    db.commit()
    db.refresh(user)
    return user


def make_event(db, owner, **overrides):
    """Insert an event row directly, bypassing schedule checks."""
    start = overrides.pop("start_time", utcnow() + timedelta(days=2))
    values = dict(
        owner_id=owner.id,
        title="Beach Cleanup",
        description="Pick up litter along the shore",
        location="Bondi Beach, Sydney",
        start_time=start,
        end_time=start + timedelta(hours=3),
        capacity=10,
        status=EventStatus.published,
        tags=[],
    )
    values.update(overrides)
    event = Event(**values)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user.id)}"}


@pytest.fixture
def organizer(db_session):
    return make_user(db_session, "org@greenteam.org", Role.organizer, org_name="Green Team")


@pytest.fixture
def other_organizer(db_session):
    return make_user(db_session, "org@bluecare.org", Role.organizer, org_name="Blue Care")


@pytest.fixture
def volunteer(db_session):
    return make_user(
        db_session, "alice@uni.edu.au", Role.volunteer,
        full_name="Alice Nguyen", phone="0412345678", university="UNSW",
    )


@pytest.fixture
def second_volunteer(db_session):
    return make_user(
        db_session, "bob@uni.edu.au", Role.volunteer,
        full_name="Bob Smith", phone="0498765432", university="USYD",
    )


@pytest.fixture
def published_event(db_session, organizer):
    return make_event(db_session, organizer)
