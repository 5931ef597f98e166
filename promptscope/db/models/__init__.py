"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc`, and all ORM classes from one import path.
"""

from .base import Base, now_utc  # re-export

from .users import User
from .teams import Team, TeamMember
from .categories import Category
from .prompts import Prompt
from .audit import AuditLog

__all__ = [
    # base
    "Base",
    "now_utc",
    # users/teams
    "User",
    "Team",
    "TeamMember",
    # categories/prompts
    "Category",
    "Prompt",
    # audit
    "AuditLog",
]
