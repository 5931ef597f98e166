"""
Domain-split Pydantic schemas re-exported from one import path.
"""

from .categories import (
    CategoryCreate,
    CategoryUpdate,
    Category,
    CategoryWithCount,
    CategoryList,
    GroupedCategories,
    GroupedCategoryList,
    CategoryStats,
    CategoryUsage,
    with_count,
)
from .teams import (
    TeamBase,
    TeamCreate,
    Team,
    TeamMemberCreate,
    TeamMemberUpdate,
    TeamMember,
)
from .prompts import Prompt
from .audits import AuditLogBase, AuditLogCreate, AuditLog

__all__ = [
    # categories
    "CategoryCreate",
    "CategoryUpdate",
    "Category",
    "CategoryWithCount",
    "CategoryList",
    "GroupedCategories",
    "GroupedCategoryList",
    "CategoryStats",
    "CategoryUsage",
    "with_count",
    # teams
    "TeamBase",
    "TeamCreate",
    "Team",
    "TeamMemberCreate",
    "TeamMemberUpdate",
    "TeamMember",
    # prompts
    "Prompt",
    # audits
    "AuditLogBase",
    "AuditLogCreate",
    "AuditLog",
]
