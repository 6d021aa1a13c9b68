from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from config.database import get_db
from config.roles_config import Role
from middlewares.role_middleware import access_decision, AccessDecision
from api.dashboard.dashboard_controller import assemble_volunteer_dashboard, assemble_org_dashboard
from api.dashboard.dashboard_schema import VolunteerDashboard, OrgDashboard

router = APIRouter(tags=["Dashboard"])


def _redirect(decision: AccessDecision) -> RedirectResponse:
    return RedirectResponse(url=decision.redirect_to, status_code=status.HTTP_303_SEE_OTHER)


@router.get(
    "/dashboard",
    response_model=VolunteerDashboard,
    summary="Volunteer home: upcoming events and own registrations",
    responses={303: {"description": "Sent to login or to the organization dashboard"}},
)
def volunteer_dashboard(
    decision: AccessDecision = Depends(access_decision(Role.volunteer)),
    db: Session = Depends(get_db),
):
    if not decision.allowed:
        return _redirect(decision)
    return assemble_volunteer_dashboard(db, decision.identity_id)


@router.get(
    "/org/dashboard",
    response_model=OrgDashboard,
    summary="Organization home: owned events with live registration counts",
    responses={303: {"description": "Sent to login or to the volunteer dashboard"}},
)
def org_dashboard(
    decision: AccessDecision = Depends(access_decision(Role.organizer)),
    db: Session = Depends(get_db),
):
    if not decision.allowed:
        return _redirect(decision)
    return assemble_org_dashboard(db, decision.identity_id)
