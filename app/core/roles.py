"""Role hierarchy: role names mapped to integer levels, plus permission helpers."""

from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    """Fixed set of account roles, lowest to highest."""

    STAFF = "staff"
    MODERATOR = "moderator"
    ADMIN = "admin"


# Higher level is a superset of every lower level. Unknown roles resolve to 0.
ROLE_LEVELS = MappingProxyType(
    {
        Role.STAFF.value: 1,
        Role.MODERATOR.value: 2,
        Role.ADMIN.value: 3,
    }
)


def role_level(role: Role | str | None) -> int:
    """Return the level for a role name; 0 for None or anything not in ROLE_LEVELS."""
    if isinstance(role, Role):
        role = role.value
    if not isinstance(role, str):
        return 0
    return ROLE_LEVELS.get(role, 0)


def is_authorized(actor_role: Role | str | None, required_role: Role | str | None) -> bool:
    """True when actor_role is at or above required_role. No required role means any authenticated actor."""
    if required_role is None:
        return True
    return role_level(actor_role) >= role_level(required_role)


def can_manage_users(role: Role | str | None) -> bool:
    return role_level(role) == ROLE_LEVELS[Role.ADMIN.value]


def can_delete_records(role: Role | str | None) -> bool:
    return is_authorized(role, Role.MODERATOR)


def can_edit_all_records(role: Role | str | None) -> bool:
    return is_authorized(role, Role.MODERATOR)


def can_view_all_records(role: Role | str | None) -> bool:
    # reading is open to every signed-in role
    return True
