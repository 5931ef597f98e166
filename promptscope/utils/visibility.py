"""
Prompt visibility rule.

A prompt is visible to a viewer when it is public or the viewer owns it.
The same rule exists in two renderings: ``is_visible`` for objects already
in memory and ``visible_clause`` for queries. Every list and count of
prompts goes through one of them.
"""
from typing import Any, Optional

from sqlalchemy import or_


def is_visible(record: Any, viewer_id: Optional[int]) -> bool:
    """Return True if ``viewer_id`` may see ``record``; guests see public records only."""
    if bool(getattr(record, "is_public", False)):
        return True
    if viewer_id is None:
        return False
    return getattr(record, "owner_id", None) == viewer_id


def visible_clause(model_class, viewer_id: Optional[int]):
    """SQL form of ``is_visible`` for a model with ``is_public`` and ``owner_id`` columns."""
    if viewer_id is None:
        return model_class.is_public.is_(True)
    return or_(
        model_class.is_public.is_(True),
        model_class.owner_id == viewer_id,
    )
