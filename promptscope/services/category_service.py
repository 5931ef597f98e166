"""
Category resolver: creation, patching, soft deletion and permission checks.

Scope rules:
- personal: owned by the acting user; only the creator manages it.
- team: any active member may file prompts into it; editors and above (or
  the creator) manage it.
- public: usable by everyone; only the creator manages it.

Names are unique among active categories of the same scope. Uniqueness is
checked with a query before writing, so soft-deleted names can be reused.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from promptscope.audit import AuditAction, log_category
from promptscope.db import models, schemas
from promptscope.db.repositories import categories as category_repo
from promptscope.errors import (
    DuplicateNameError,
    NotFoundError,
    PermissionDeniedError,
    ProtectedResourceError,
    ValidationError,
)
from promptscope.services.membership import MembershipOracle
from promptscope.utils.scopes import (
    SCOPE_PERSONAL,
    SCOPE_PUBLIC,
    SCOPE_TEAM,
    Scope,
    TeamScope,
    build_scope,
    scope_of,
)
from promptscope.utils.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class CategoryService:
    """Service class for category lifecycle and permission decisions."""

    def __init__(
        self,
        db: Session,
        oracle: Optional[MembershipOracle] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.oracle = oracle or MembershipOracle(db)
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_category(self, category_id: int) -> Optional[models.Category]:
        """Active category by id, or None."""
        return category_repo.get_active_category(self.db, category_id)

    def get_categories_by_ids(self, category_ids: Iterable[int]) -> List[models.Category]:
        return category_repo.get_categories_by_ids(self.db, category_ids)

    def get_category_stats(self) -> Dict[str, int]:
        counts = category_repo.count_active_by_scope(self.db)
        return {
            "total": sum(counts.values()),
            "personal": counts[SCOPE_PERSONAL],
            "team": counts[SCOPE_TEAM],
            "public": counts[SCOPE_PUBLIC],
        }

    def is_reserved(self, category: models.Category) -> bool:
        """True for a user's fallback category."""
        if category.is_uncategorized:
            return True
        return category.scope_type == SCOPE_PERSONAL and category.name == self.settings.uncategorized_name

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------
    def can_manage(self, user_id: Optional[int], category: models.Category) -> bool:
        """Whether ``user_id`` may rename, recolor or delete ``category``."""
        if user_id is None or category is None:
            return False
        if category.created_by == user_id:
            return True
        if category.scope_type == SCOPE_TEAM:
            return self.oracle.can_manage_team_categories(user_id, category.scope_key)
        return False

    def can_use(self, user_id: Optional[int], category_id: int) -> bool:
        """Whether ``user_id`` may file prompts into (and browse) the category."""
        category = self.get_category(category_id)
        if category is None:
            return False
        if category.scope_type == SCOPE_PUBLIC:
            return True
        if user_id is None:
            return False
        if category.scope_type == SCOPE_PERSONAL:
            return category.scope_key == user_id
        if category.scope_type == SCOPE_TEAM:
            return self.oracle.is_member(user_id, category.scope_key)
        return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_category(self, data: schemas.CategoryCreate, acting_user_id: int) -> models.Category:
        scope = build_scope(data.scope_type, data.scope_key, acting_user_id)

        if isinstance(scope, TeamScope) and not self.oracle.can_manage_team_categories(acting_user_id, scope.team_id):
            logger.info("User %s denied creating a category in team %s", acting_user_id, scope.team_id)
            raise PermissionDeniedError("No permission to create categories in this team")

        if scope.scope_type == SCOPE_PERSONAL and data.name == self.settings.uncategorized_name:
            raise ValidationError(f"'{data.name}' is reserved for the default category")

        self._check_duplicate_name(data.name, scope)

        category = category_repo.create_category(
            self.db,
            name=data.name,
            description=data.description,
            scope=scope,
            created_by=acting_user_id,
            color=data.color,
        )
        logger.info(
            "User %s created category %s (%s:%s)",
            acting_user_id, category.id, category.scope_type, category.scope_key,
        )
        log_category(self.db, actor_user_id=acting_user_id, category=category, action=AuditAction.CATEGORY_CREATE)
        return category

    def update_category(
        self, category_id: int, patch: schemas.CategoryUpdate, acting_user_id: int
    ) -> models.Category:
        category = self._get_or_404(category_id)
        if not self.can_manage(acting_user_id, category):
            raise PermissionDeniedError("No permission to update this category")

        update_data = patch.model_dump(exclude_unset=True)
        if update_data.get("name") is None:
            update_data.pop("name", None)

        new_name = update_data.get("name")
        if new_name is not None and new_name != category.name:
            if self.is_reserved(category):
                raise ProtectedResourceError("Cannot rename the default uncategorized category")
            if category.scope_type == SCOPE_PERSONAL and new_name == self.settings.uncategorized_name:
                raise ValidationError(f"'{new_name}' is reserved for the default category")
            self._check_duplicate_name(new_name, scope_of(category), exclude_id=category.id)

        changed = sorted(update_data)
        category = category_repo.update_category(self.db, category, update_data)
        logger.info("User %s updated category %s (%s)", acting_user_id, category.id, ", ".join(changed))
        log_category(
            self.db,
            actor_user_id=acting_user_id,
            category=category,
            action=AuditAction.CATEGORY_UPDATE,
            metadata={"fields": changed},
        )
        return category

    def delete_category(self, category_id: int, acting_user_id: int) -> None:
        category = self._get_or_404(category_id)

        # Checked before the permission gate so the owner gets a specific error.
        if self.is_reserved(category) and category.scope_key == acting_user_id:
            raise ProtectedResourceError()
        if not self.can_manage(acting_user_id, category):
            raise PermissionDeniedError("No permission to delete this category")
        if self.is_reserved(category):
            raise ProtectedResourceError()

        category_repo.soft_delete_category(self.db, category)
        logger.info("User %s deleted category %s", acting_user_id, category.id)
        log_category(self.db, actor_user_id=acting_user_id, category=category, action=AuditAction.CATEGORY_DELETE)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _get_or_404(self, category_id: int) -> models.Category:
        category = self.get_category(category_id)
        if category is None:
            raise NotFoundError()
        return category

    def _check_duplicate_name(self, name: str, scope: Scope, exclude_id: Optional[int] = None) -> None:
        existing = category_repo.find_active_by_name(
            self.db,
            name,
            scope_type=scope.scope_type,
            scope_key=scope.scope_key,
            exclude_id=exclude_id,
        )
        if existing is not None:
            raise DuplicateNameError(f"A category named '{name}' already exists in this scope")
