from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from .base import Base, now_utc


class Prompt(Base):
    __tablename__ = 'prompts'
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=True)
    # Free-text label carried by records created before categories existed
    category = Column(String(100), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_prompts_category_id', 'category_id'),
        Index('idx_prompts_owner_id', 'owner_id'),
    )
