from typing import List, Optional

from pydantic import BaseModel

from api.events.events_schema import EventRead
from api.events.event_registrations_schema import MyRegistrationOut
from api.profiles.profiles_schema import OrganizationProfileResponse


class VolunteerDashboard(BaseModel):
    upcoming: List[EventRead]
    registrations: List[MyRegistrationOut]


class OrgDashboard(BaseModel):
    profile: Optional[OrganizationProfileResponse] = None
    events: List[EventRead]
    total_registrations: int
