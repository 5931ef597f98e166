"""
Uncategorized provisioner.

Every user owns exactly one active personal fallback category. It is created
lazily on first access and can never be deleted. Concurrent first access is
settled by the partial unique index ``uq_categories_uncategorized_owner``:
the losing insert hits the index, its savepoint is rolled back and the
winner's row is read back.
"""
import logging
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from promptscope.db import models
from promptscope.db.repositories import categories as category_repo
from promptscope.db.repositories import prompts as prompt_repo
from promptscope.db.repositories import users as user_repo
from promptscope.utils.scopes import SCOPE_PERSONAL, PersonalScope
from promptscope.utils.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Fixed display metadata for fallback categories
UNCATEGORIZED_COLOR = "#6B7280"


def get_uncategorized(db: Session, user_id: int) -> Optional[models.Category]:
    """Return the user's active fallback category, or None. Deactivated rows are ignored."""
    return (
        db.query(models.Category)
        .filter(
            models.Category.scope_type == SCOPE_PERSONAL,
            models.Category.scope_key == user_id,
            models.Category.is_uncategorized.is_(True),
            models.Category.is_active.is_(True),
        )
        .first()
    )


def ensure_uncategorized(db: Session, user_id: int, settings: Optional[Settings] = None) -> models.Category:
    """Get or create the user's fallback category. Idempotent and safe under concurrent callers."""
    existing = get_uncategorized(db, user_id)
    if existing is not None:
        return existing

    settings = settings or get_settings()
    try:
        with db.begin_nested():
            category = category_repo.create_category(
                db,
                name=settings.uncategorized_name,
                description=settings.uncategorized_description,
                scope=PersonalScope(owner_id=user_id),
                created_by=user_id,
                color=UNCATEGORIZED_COLOR,
                is_uncategorized=True,
                commit=False,
            )
    except IntegrityError:
        # Another request created it first; read back the surviving row.
        logger.info("Uncategorized category for user %s was created concurrently; reusing it", user_id)
        existing = get_uncategorized(db, user_id)
        if existing is None:
            raise
        return existing

    db.commit()
    db.refresh(category)
    logger.info("Provisioned uncategorized category %s for user %s", category.id, user_id)
    return category


def backfill_uncategorized(db: Session, settings: Optional[Settings] = None) -> Dict[str, int]:
    """Make sure every existing user has a fallback category."""
    created = skipped = 0
    user_ids = user_repo.get_all_user_ids(db)
    for user_id in user_ids:
        if get_uncategorized(db, user_id) is not None:
            skipped += 1
            continue
        ensure_uncategorized(db, user_id, settings=settings)
        created += 1
    logger.info("Uncategorized backfill: %d created, %d skipped, %d users", created, skipped, len(user_ids))
    return {"created": created, "skipped": skipped, "total": len(user_ids)}


def assign_orphan_prompts(db: Session, settings: Optional[Settings] = None) -> int:
    """File every prompt without a category into its owner's fallback category."""
    moved = 0
    for owner_id in prompt_repo.get_orphan_owner_ids(db):
        fallback = ensure_uncategorized(db, owner_id, settings=settings)
        count = prompt_repo.assign_orphans_to_category(db, owner_id, fallback.id)
        logger.info("Moved %d uncategorized prompts of user %s into category %s", count, owner_id, fallback.id)
        moved += count
    return moved
