# config/roles_config.py

from enum import Enum


class Role(str, Enum):
    volunteer = "volunteer"   # "student" in the UI copy
    organizer = "organizer"   # "organization" in the UI copy


class EntryContext(str, Enum):
    standard        = "standard"         # volunteer login / any plain request
    organizer_entry = "organizer_entry"  # the organization-specific login


# Where a role-scoped page lives, and where its login lives
DASHBOARD_ROUTES = {
    Role.volunteer: "/dashboard",
    Role.organizer: "/org/dashboard",
}

LOGIN_ROUTES = {
    Role.volunteer: "/auth/login",
    Role.organizer: "/auth/org-login",
}

# Which role an entry point is meant for
ENTRY_ROLES = {
    EntryContext.standard:        Role.volunteer,
    EntryContext.organizer_entry: Role.organizer,
}


def default_role_for(entry_context: EntryContext) -> Role:
    """Role synthesized for an identity that authenticated without one."""
    if entry_context == EntryContext.organizer_entry:
        return Role.organizer
    return Role.volunteer
