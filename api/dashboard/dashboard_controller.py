from sqlalchemy.orm import Session

from api.dashboard.dashboard_service import (
    get_upcoming_events,
    get_registered_events,
    get_my_events,
    get_total_registrations,
    get_org_profile,
)
from api.dashboard.dashboard_schema import VolunteerDashboard, OrgDashboard


def assemble_volunteer_dashboard(db: Session, user_id: int) -> VolunteerDashboard:
    return VolunteerDashboard(
        upcoming=get_upcoming_events(db),
        registrations=get_registered_events(db, user_id),
    )


def assemble_org_dashboard(db: Session, user_id: int) -> OrgDashboard:
    events = get_my_events(db, user_id)
    return OrgDashboard(
        profile=get_org_profile(db, user_id),
        events=events,
        total_registrations=get_total_registrations(events),
    )
