"""
Role utilities for team members.

Roles are totally ordered: viewer < editor < admin < owner. Category
management inside a team needs at least editor; plain membership (any role)
is enough to browse and file prompts into team categories.
"""

from typing import Dict, FrozenSet, Optional, Set
from enum import Enum


# Central role constants to ensure consistency across the codebase
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"

ROLE_RANK: Dict[str, int] = {
    ROLE_VIEWER: 0,
    ROLE_EDITOR: 1,
    ROLE_ADMIN: 2,
    ROLE_OWNER: 3,
}

ALLOWED_ROLES = set(ROLE_RANK.keys())

# Minimum role that may create, rename or delete team categories
CATEGORY_MANAGE_MIN_ROLE = ROLE_EDITOR

# Derived role groups
CATEGORY_MANAGE_ROLES: FrozenSet[str] = frozenset(
    role for role, rank in ROLE_RANK.items() if rank >= ROLE_RANK[CATEGORY_MANAGE_MIN_ROLE]
)
TEAM_ADMIN_ROLES: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_ADMIN})


class RoleEnum(str, Enum):
    """Enum for team roles used in schemas and validation."""
    owner = ROLE_OWNER
    admin = ROLE_ADMIN
    editor = ROLE_EDITOR
    viewer = ROLE_VIEWER


def get_allowed_roles() -> Set[str]:
    """Get the set of all allowed roles."""
    return ALLOWED_ROLES.copy()


def validate_role(role: str) -> None:
    """
    Validate that a role is allowed.

    Raises:
        ValueError: If role is not allowed
    """
    if role not in ALLOWED_ROLES:
        raise ValueError(f"Invalid role '{role}'. Allowed roles: {sorted(ALLOWED_ROLES)}")


def role_at_least(role: Optional[str], minimum: str) -> bool:
    """Return True if ``role`` ranks at or above ``minimum``; unknown roles rank nowhere."""
    if role is None or role not in ROLE_RANK:
        return False
    return ROLE_RANK[role] >= ROLE_RANK[minimum]


def role_allows_manage_categories(role: Optional[str]) -> bool:
    """Return True if the role may manage team categories (editor and above)."""
    return role_at_least(role, CATEGORY_MANAGE_MIN_ROLE)


def role_allows_manage_team(role: Optional[str]) -> bool:
    """Return True if the role may manage team membership."""
    return role in TEAM_ADMIN_ROLES
