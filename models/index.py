from config.database import engine, SessionLocal, Base

# Importing every model registers its table on Base.metadata and lets the
# string-based relationships between them resolve.
from api.user.user_model import User
from api.roles.roles_model import UserRole
from api.profiles.profiles_model import StudentProfile, OrganizationProfile
from api.events.events_model import Event
from api.events.event_registrations_model import EventRegistration


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)


__all__ = ["engine", "SessionLocal", "Base", "init_db"]
