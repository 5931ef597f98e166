"""
Membership oracle: answers "is this user in that team, and with what role".

One oracle instance is meant to live for a single request; memberships are
loaded once per user and reused by every check made through it.
"""
import logging
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from promptscope.db.repositories import teams as team_repo
from promptscope.utils.role_permissions import role_allows_manage_categories

logger = logging.getLogger(__name__)


class MembershipOracle:
    """Read-only view over active team memberships."""

    def __init__(self, db: Session):
        self.db = db
        self._cache: Dict[int, Dict[int, str]] = {}

    def _roles_by_team(self, user_id: Optional[int]) -> Dict[int, str]:
        if user_id is None:
            return {}
        if user_id not in self._cache:
            self._cache[user_id] = dict(team_repo.get_active_memberships(self.db, user_id))
            logger.debug("Loaded %d memberships for user %s", len(self._cache[user_id]), user_id)
        return self._cache[user_id]

    def active_memberships(self, user_id: Optional[int]) -> Set[Tuple[int, str]]:
        return set(self._roles_by_team(user_id).items())

    def team_ids(self, user_id: Optional[int]) -> List[int]:
        return sorted(self._roles_by_team(user_id))

    def role_of(self, user_id: Optional[int], team_id: Optional[int]) -> Optional[str]:
        if team_id is None:
            return None
        return self._roles_by_team(user_id).get(team_id)

    def is_member(self, user_id: Optional[int], team_id: Optional[int]) -> bool:
        return self.role_of(user_id, team_id) is not None

    def can_manage_team_categories(self, user_id: Optional[int], team_id: Optional[int]) -> bool:
        """Editors, admins and owners may create, rename and delete team categories."""
        return role_allows_manage_categories(self.role_of(user_id, team_id))

    def invalidate(self, user_id: Optional[int] = None) -> None:
        """Drop cached memberships after a membership change."""
        if user_id is None:
            self._cache.clear()
        else:
            self._cache.pop(user_id, None)
