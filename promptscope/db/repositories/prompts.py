"""
Prompt repository functions.

Only the queries the category engine needs: visibility-filtered counts and
listings per category, plus the orphan lookups used by the backfill script.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from promptscope.db import models
from promptscope.utils.visibility import visible_clause


def create_prompt(
    db: Session,
    *,
    title: str,
    content: str,
    owner_id: int,
    category_id: Optional[int] = None,
    is_public: bool = False,
    description: Optional[str] = None,
) -> models.Prompt:
    db_prompt = models.Prompt(
        title=title,
        content=content,
        description=description,
        owner_id=owner_id,
        category_id=category_id,
        is_public=is_public,
    )
    db.add(db_prompt)
    db.commit()
    db.refresh(db_prompt)
    return db_prompt


def count_visible_by_category(
    db: Session, category_ids: Iterable[int], viewer_id: Optional[int]
) -> Dict[int, int]:
    """Number of prompts visible to ``viewer_id`` per category, in one grouped query.

    Categories with no visible prompts are absent from the result.
    """
    ids = list(category_ids or [])
    if not ids:
        return {}
    rows = (
        db.query(models.Prompt.category_id, func.count(models.Prompt.id))
        .filter(
            models.Prompt.category_id.in_(ids),
            visible_clause(models.Prompt, viewer_id),
        )
        .group_by(models.Prompt.category_id)
        .all()
    )
    return {int(category_id): int(count) for category_id, count in rows}


def list_by_category(
    db: Session,
    category_id: int,
    viewer_id: Optional[int],
    skip: int = 0,
    limit: int = 100,
) -> List[models.Prompt]:
    return (
        db.query(models.Prompt)
        .filter(
            models.Prompt.category_id == category_id,
            visible_clause(models.Prompt, viewer_id),
        )
        .order_by(models.Prompt.created_at.desc(), models.Prompt.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_orphan_owner_ids(db: Session) -> List[int]:
    """Distinct owners of prompts that are not filed in any category."""
    rows = (
        db.query(models.Prompt.owner_id)
        .filter(models.Prompt.category_id.is_(None))
        .distinct()
        .all()
    )
    return [int(owner_id) for (owner_id,) in rows]


def assign_orphans_to_category(db: Session, owner_id: int, category_id: int) -> int:
    """File every uncategorized prompt of ``owner_id`` into ``category_id``."""
    updated = (
        db.query(models.Prompt)
        .filter(models.Prompt.owner_id == owner_id, models.Prompt.category_id.is_(None))
        .update({models.Prompt.category_id: category_id}, synchronize_session=False)
    )
    db.commit()
    return int(updated or 0)
