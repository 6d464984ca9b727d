from enum import Enum


class Role(str, Enum):
    PORTAL_ADMIN = 'Portal Admin'
    FACULTY = 'Faculty'
    STUDENT_COORDINATOR = 'Student Coordinator'
    PLACEMENT_EXECUTIVE = 'Placement Executive'


# Capability table; every role check in the app goes through the helpers below
_OVERRIDE_ROLES = frozenset({Role.PLACEMENT_EXECUTIVE})
_MANAGE_ROLES = frozenset({Role.PORTAL_ADMIN})


def role_of(user):
    """Return the Role for a user, or None when the stored value is unknown."""
    if user is None or not user.role:
        return None
    try:
        return Role(user.role)
    except ValueError:
        return None


def can_override(role) -> bool:
    """Whether the role may create priority bookings that displace others."""
    return role in _OVERRIDE_ROLES


def can_manage_bookings(role) -> bool:
    """Approve, deny, reschedule, complete and delete any booking."""
    return role in _MANAGE_ROLES


def can_create_direct(role) -> bool:
    return role in _MANAGE_ROLES
