from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from .base import Base, now_utc


class Category(Base):
    __tablename__ = 'categories'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    # Governance scoping: scope_key is the owning user id (personal),
    # the owning team id (team) or NULL (public).
    scope_type = Column(String(20), nullable=False)
    scope_key = Column(Integer, nullable=True)
    created_by = Column(Integer, ForeignKey('users.id'), nullable=False)
    color = Column(String(7), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    # Marks each user's reserved fallback category
    is_uncategorized = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_categories_scope_active', 'scope_type', 'scope_key', 'is_active'),
        Index('idx_categories_created_by', 'created_by'),
        Index('idx_categories_name', 'name'),
        # At most one active fallback category per user; the provisioner relies
        # on this index to resolve concurrent first access.
        Index(
            'uq_categories_uncategorized_owner',
            'scope_key',
            unique=True,
            postgresql_where=text('is_uncategorized AND is_active'),
            sqlite_where=text('is_uncategorized AND is_active'),
        ),
        CheckConstraint(
            "scope_type in ('personal','team','public')",
            name='ck_categories_scope_type',
        ),
        CheckConstraint(
            "(scope_type = 'public' AND scope_key IS NULL) OR "
            "(scope_type IN ('personal','team') AND scope_key IS NOT NULL)",
            name='ck_categories_scope_key',
        ),
    )
