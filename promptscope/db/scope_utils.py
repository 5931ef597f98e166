"""
Scope filtering utilities for category queries.

Builds the "which containers can this viewer browse" predicate once so the
aggregator, the team listing and the resolver all agree on it.
"""
from typing import Iterable, List, Optional

from sqlalchemy import and_, false, or_

from promptscope.utils.scopes import SCOPE_PERSONAL, SCOPE_PUBLIC, SCOPE_TEAM


def normalize_team_ids(team_ids: Optional[Iterable]) -> List[int]:
    """Coerce team ids to a sorted, de-duplicated list of ints, skipping junk."""
    result = set()
    for raw in team_ids or []:
        if raw is None or isinstance(raw, bool):
            continue
        try:
            result.add(int(raw))
        except (TypeError, ValueError):
            continue
    return sorted(result)


def category_scope_clause(
    model_class,
    viewer_id: Optional[int],
    team_ids: Optional[Iterable] = None,
    *,
    include_public: bool = True,
):
    """
    Boolean clause selecting categories the viewer may browse.

    Args:
        model_class: The category model
        viewer_id: Viewer user id, or None for guests
        team_ids: Teams the viewer is an active member of
        include_public: Whether public categories are part of the result

    Returns:
        SQLAlchemy boolean clause (does not include the is_active filter)
    """
    conditions = []
    ids = normalize_team_ids(team_ids)

    if viewer_id is not None:
        conditions.append(
            and_(model_class.scope_type == SCOPE_PERSONAL, model_class.scope_key == viewer_id)
        )
        if ids:
            conditions.append(
                and_(model_class.scope_type == SCOPE_TEAM, model_class.scope_key.in_(ids))
            )

    if include_public:
        conditions.append(model_class.scope_type == SCOPE_PUBLIC)

    if not conditions:
        return false()
    return or_(*conditions)


def apply_category_scope_filter(query, model_class, viewer_id, team_ids=None, **kwargs):
    """Apply ``category_scope_clause`` plus the active-only filter to a query."""
    return query.filter(
        model_class.is_active.is_(True),
        category_scope_clause(model_class, viewer_id, team_ids, **kwargs),
    )
