import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from promptscope.utils.scopes import ScopeTypeEnum

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
_HEX_COLOR = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Name must be a non-empty string")
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be {NAME_MAX_LENGTH} characters or less")
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less")
    return value.strip() or None


def _clean_color(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not _HEX_COLOR.match(value):
        raise ValueError("Color must be a valid hex color code (e.g., #FF5733)")
    return value.upper()


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryCreate(CamelModel):
    name: str
    description: Optional[str] = None
    scope_type: ScopeTypeEnum
    # Accepted under the legacy "scopeId" spelling as well
    scope_key: Optional[int] = Field(default=None, validation_alias="scopeKey")
    scope_id: Optional[int] = Field(default=None, exclude=True)
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[str]) -> Optional[str]:
        return _clean_description(value)

    @field_validator("color")
    @classmethod
    def _color(cls, value: Optional[str]) -> Optional[str]:
        return _clean_color(value)

    @model_validator(mode="after")
    def _merge_legacy_scope_id(self):
        if self.scope_key is None and self.scope_id is not None:
            self.scope_key = self.scope_id
        return self


class CategoryUpdate(CamelModel):
    """Patch body; scope fields are immutable after creation and rejected here."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: Optional[str]) -> Optional[str]:
        return _clean_name(value)

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[str]) -> Optional[str]:
        return _clean_description(value)

    @field_validator("color")
    @classmethod
    def _color(cls, value: Optional[str]) -> Optional[str]:
        return _clean_color(value)

    @model_validator(mode="after")
    def _at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class Category(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    scope_type: str
    scope_key: Optional[int] = None
    created_by: int
    color: Optional[str] = None
    is_active: bool
    is_uncategorized: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryWithCount(Category):
    prompt_count: int = 0


class CategoryList(CamelModel):
    categories: List[CategoryWithCount]
    total: int


class GroupedCategories(CamelModel):
    personal: List[CategoryWithCount] = []
    team: List[CategoryWithCount] = []
    public: List[CategoryWithCount] = []


class GroupedCategoryList(CamelModel):
    categories: GroupedCategories
    total: int


class CategoryStats(CamelModel):
    total: int
    personal: int
    team: int
    public: int


class CategoryUsage(CamelModel):
    can_use: bool
    category_id: int
    user_id: int


def with_count(category, prompt_count: int) -> CategoryWithCount:
    """Annotate an ORM category with the number of prompts visible to a viewer."""
    data: Dict = Category.model_validate(category).model_dump()
    return CategoryWithCount(**data, prompt_count=prompt_count)
