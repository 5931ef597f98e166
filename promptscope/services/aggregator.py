"""
Visible-set aggregator.

Builds the ordered list of categories a viewer may browse and annotates each
with the number of prompts *that viewer* can see inside it. Counts are taken
with one grouped query per scope class, so the number of queries does not
grow with the number of categories.

If counting fails at the data-access layer the listing is still returned,
with every count set to 0, and a warning is logged.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promptscope.db import models, schemas
from promptscope.db.repositories import categories as category_repo
from promptscope.db.repositories import prompts as prompt_repo
from promptscope.errors import PermissionDeniedError
from promptscope.services.membership import MembershipOracle
from promptscope.services.uncategorized import ensure_uncategorized
from promptscope.utils.scopes import ALL_SCOPES, SCOPE_PERSONAL, SCOPE_PUBLIC, SCOPE_RANK, SCOPE_TEAM, sort_key
from promptscope.utils.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class CategoryAggregator:
    """Computes per-viewer category listings with visible prompt counts."""

    def __init__(
        self,
        db: Session,
        oracle: Optional[MembershipOracle] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.oracle = oracle or MembershipOracle(db)
        self.settings = settings or get_settings()

    def visible_categories(self, viewer_id: int) -> List[schemas.CategoryWithCount]:
        """Own personal categories, categories of every team the viewer belongs to, and public ones."""
        ensure_uncategorized(self.db, viewer_id, settings=self.settings)
        team_ids = self.oracle.team_ids(viewer_id)
        categories = category_repo.list_scoped_categories(self.db, viewer_id, team_ids, include_public=True)
        return self.attach_counts(self._sorted(categories), viewer_id)

    def my_categories(self, viewer_id: int) -> List[schemas.CategoryWithCount]:
        """Everything the viewer can browse; team categories are included whoever created them."""
        return self.visible_categories(viewer_id)

    def team_categories(self, team_id: int, viewer_id: int) -> List[schemas.CategoryWithCount]:
        if not self.oracle.is_member(viewer_id, team_id):
            raise PermissionDeniedError("Not a member of this team")
        categories = category_repo.list_team_categories(self.db, team_id)
        return self.attach_counts(self._sorted(categories), viewer_id)

    def public_categories(self, viewer_id: Optional[int] = None) -> List[schemas.CategoryWithCount]:
        categories = category_repo.list_scoped_categories(self.db, None, None, include_public=True)
        return self.attach_counts(self._sorted(categories), viewer_id)

    def grouped(self, viewer_id: Optional[int]) -> Dict[str, List[schemas.CategoryWithCount]]:
        """Listing split by scope; guests only get public categories."""
        if viewer_id is None:
            annotated = self.public_categories(None)
        else:
            annotated = self.visible_categories(viewer_id)
        groups: Dict[str, List[schemas.CategoryWithCount]] = {
            scope: [] for scope in sorted(ALL_SCOPES, key=SCOPE_RANK.get)
        }
        for item in annotated:
            groups[item.scope_type].append(item)
        return groups

    def attach_counts(
        self, categories: Iterable[models.Category], viewer_id: Optional[int]
    ) -> List[schemas.CategoryWithCount]:
        """Annotate categories with prompt counts visible to ``viewer_id``."""
        # Snapshot rows first; a rollback below would expire them.
        annotated = [schemas.with_count(category, 0) for category in categories]
        by_scope: Dict[str, List[int]] = defaultdict(list)
        for item in annotated:
            by_scope[item.scope_type].append(item.id)

        counts: Dict[int, int] = {}
        try:
            for scope_type in (SCOPE_PERSONAL, SCOPE_TEAM, SCOPE_PUBLIC):
                ids = by_scope.get(scope_type)
                if ids:
                    counts.update(prompt_repo.count_visible_by_category(self.db, ids, viewer_id))
        except SQLAlchemyError as exc:
            logger.warning(
                "Prompt counts unavailable for viewer %s; returning zero counts: %s", viewer_id, exc
            )
            self.db.rollback()
            return annotated

        for item in annotated:
            item.prompt_count = counts.get(item.id, 0)
        return annotated

    def _sorted(self, categories: Iterable[models.Category]) -> List[models.Category]:
        reserved = self.settings.uncategorized_name
        return sorted(categories, key=lambda c: sort_key(c.name, c.scope_type, reserved))
