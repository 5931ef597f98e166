from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Prompt(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    owner_id: int
    category_id: Optional[int] = None
    is_public: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
