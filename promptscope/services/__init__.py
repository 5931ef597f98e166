"""Business logic services for category scoping and visibility."""

from .membership import MembershipOracle
from .category_service import CategoryService
from .aggregator import CategoryAggregator
from .uncategorized import (
    UNCATEGORIZED_COLOR,
    assign_orphan_prompts,
    backfill_uncategorized,
    ensure_uncategorized,
    get_uncategorized,
)

__all__ = [
    "MembershipOracle",
    "CategoryService",
    "CategoryAggregator",
    "UNCATEGORIZED_COLOR",
    "assign_orphan_prompts",
    "backfill_uncategorized",
    "ensure_uncategorized",
    "get_uncategorized",
]
