"""
Category repository functions.

Container store: create, lookup by id, the active-by-(name, scope) lookup used
for uniqueness checks, patch, soft delete and scope-filtered listings.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from promptscope.db import models, scope_utils
from promptscope.utils.scopes import ALL_SCOPES, SCOPE_PUBLIC, SCOPE_TEAM, Scope


def create_category(
    db: Session,
    *,
    name: str,
    scope: Scope,
    created_by: int,
    description: Optional[str] = None,
    color: Optional[str] = None,
    is_uncategorized: bool = False,
    commit: bool = True,
) -> models.Category:
    db_category = models.Category(
        name=name,
        description=description,
        scope_type=scope.scope_type,
        scope_key=scope.scope_key,
        created_by=created_by,
        color=color,
        is_active=True,
        is_uncategorized=is_uncategorized,
    )
    db.add(db_category)
    if commit:
        db.commit()
        db.refresh(db_category)
    else:
        db.flush()
    return db_category


def get_category(db: Session, category_id: int) -> Optional[models.Category]:
    """Return the category regardless of its active flag."""
    return db.query(models.Category).filter(models.Category.id == category_id).first()


def get_active_category(db: Session, category_id: int) -> Optional[models.Category]:
    return (
        db.query(models.Category)
        .filter(models.Category.id == category_id, models.Category.is_active.is_(True))
        .first()
    )


def get_categories_by_ids(db: Session, category_ids: Iterable[int]) -> List[models.Category]:
    ids = list(category_ids or [])
    if not ids:
        return []
    return (
        db.query(models.Category)
        .filter(models.Category.id.in_(ids), models.Category.is_active.is_(True))
        .all()
    )


def find_active_by_name(
    db: Session,
    name: str,
    *,
    scope_type: str,
    scope_key: Optional[int],
    exclude_id: Optional[int] = None,
) -> Optional[models.Category]:
    """Active category with this exact name in the given scope, if any."""
    q = db.query(models.Category).filter(
        models.Category.name == name,
        models.Category.scope_type == scope_type,
        models.Category.is_active.is_(True),
    )
    if scope_type == SCOPE_PUBLIC:
        q = q.filter(models.Category.scope_key.is_(None))
    else:
        q = q.filter(models.Category.scope_key == scope_key)
    if exclude_id is not None:
        q = q.filter(models.Category.id != exclude_id)
    return q.first()


def update_category(db: Session, db_category: models.Category, update_data: Dict) -> models.Category:
    for key, value in update_data.items():
        setattr(db_category, key, value)
    db.commit()
    db.refresh(db_category)
    return db_category


def soft_delete_category(db: Session, db_category: models.Category) -> models.Category:
    db_category.is_active = False
    db.commit()
    db.refresh(db_category)
    return db_category


def list_scoped_categories(
    db: Session,
    viewer_id: Optional[int],
    team_ids: Optional[Iterable[int]] = None,
    *,
    include_public: bool = True,
) -> List[models.Category]:
    q = db.query(models.Category)
    q = scope_utils.apply_category_scope_filter(
        q,
        models.Category,
        viewer_id,
        team_ids,
        include_public=include_public,
    )
    return q.all()


def list_team_categories(db: Session, team_id: int) -> List[models.Category]:
    return (
        db.query(models.Category)
        .filter(
            models.Category.is_active.is_(True),
            models.Category.scope_type == SCOPE_TEAM,
            models.Category.scope_key == team_id,
        )
        .all()
    )


def count_active_by_scope(db: Session) -> Dict[str, int]:
    rows = (
        db.query(models.Category.scope_type, func.count(models.Category.id))
        .filter(models.Category.is_active.is_(True))
        .group_by(models.Category.scope_type)
        .all()
    )
    counts = {scope: 0 for scope in ALL_SCOPES}
    for scope_type, count in rows:
        counts[scope_type] = int(count)
    return counts
