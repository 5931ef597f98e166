"""
Category scope constants and the closed scope variant.

A category belongs to exactly one of three scopes. The stored row keeps a
``scope_type`` string plus a nullable ``scope_key``; in code the pair is
always lifted into one of the variant classes below so that invalid
combinations (team scope without a team, personal scope owned by someone
other than the actor) cannot be built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple, Union

from promptscope.errors import ValidationError

# Canonical scope values stored in the database
SCOPE_PERSONAL = "personal"
SCOPE_TEAM = "team"
SCOPE_PUBLIC = "public"

ALL_SCOPES: FrozenSet[str] = frozenset({SCOPE_PERSONAL, SCOPE_TEAM, SCOPE_PUBLIC})

# Listing order: personal < team < public
SCOPE_RANK = {
    SCOPE_PERSONAL: 0,
    SCOPE_TEAM: 1,
    SCOPE_PUBLIC: 2,
}


def is_valid_scope(scope: str) -> bool:
    """Return True if the provided scope is one of the supported values."""
    return scope in ALL_SCOPES


class ScopeTypeEnum(str, Enum):
    """Enum for category scopes used in schemas and validation."""
    personal = SCOPE_PERSONAL
    team = SCOPE_TEAM
    public = SCOPE_PUBLIC


@dataclass(frozen=True)
class PersonalScope:
    owner_id: int

    scope_type = SCOPE_PERSONAL

    @property
    def scope_key(self) -> Optional[int]:
        return self.owner_id


@dataclass(frozen=True)
class TeamScope:
    team_id: int

    scope_type = SCOPE_TEAM

    @property
    def scope_key(self) -> Optional[int]:
        return self.team_id


@dataclass(frozen=True)
class PublicScope:
    scope_type = SCOPE_PUBLIC

    @property
    def scope_key(self) -> Optional[int]:
        return None


Scope = Union[PersonalScope, TeamScope, PublicScope]


def _coerce_key(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def build_scope(scope_type: Any, scope_key: Any, acting_user_id: int) -> Scope:
    """Build a scope from raw request input on behalf of ``acting_user_id``.

    Raises:
        ValidationError: unknown scope type, team scope without a valid team
            id, a personal key naming another user, or a key on public scope.
    """
    raw_type = scope_type.value if isinstance(scope_type, Enum) else scope_type
    if not isinstance(raw_type, str) or not is_valid_scope(raw_type):
        raise ValidationError(
            "Invalid scope type",
            details=[f"scopeType must be one of {sorted(ALL_SCOPES)}"],
        )

    if raw_type == SCOPE_PERSONAL:
        if scope_key is not None and _coerce_key(scope_key) != acting_user_id:
            raise ValidationError("Personal categories cannot be created on behalf of another user")
        return PersonalScope(owner_id=acting_user_id)

    if raw_type == SCOPE_TEAM:
        team_id = _coerce_key(scope_key)
        if team_id is None or team_id <= 0:
            raise ValidationError("Team ID is required for team categories")
        return TeamScope(team_id=team_id)

    if scope_key is not None:
        raise ValidationError("Public categories do not take a scope key")
    return PublicScope()


def scope_of(category) -> Scope:
    """Lift a stored category row (or any object with scope columns) into a scope."""
    scope_type = getattr(category, "scope_type", None)
    scope_key = getattr(category, "scope_key", None)
    if scope_type == SCOPE_PERSONAL and scope_key is not None:
        return PersonalScope(owner_id=scope_key)
    if scope_type == SCOPE_TEAM and scope_key is not None:
        return TeamScope(team_id=scope_key)
    if scope_type == SCOPE_PUBLIC:
        return PublicScope()
    raise ValueError(f"Malformed scope on category: type={scope_type!r} key={scope_key!r}")


def sort_key(name: str, scope_type: str, reserved_name: str) -> Tuple[int, int, str]:
    """Listing order: reserved fallback first, then scope rank, then name."""
    return (
        0 if name == reserved_name else 1,
        SCOPE_RANK.get(scope_type, len(SCOPE_RANK)),
        name,
    )
