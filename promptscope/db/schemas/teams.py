from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from promptscope.utils.role_permissions import RoleEnum


class TeamBase(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Team name is required")
        return value


class TeamCreate(TeamBase):
    pass


class Team(TeamBase):
    id: int
    owner_id: int
    is_active: bool
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TeamMemberCreate(BaseModel):
    user_id: int
    role: RoleEnum = RoleEnum.viewer


class TeamMemberUpdate(BaseModel):
    role: RoleEnum


class TeamMember(BaseModel):
    team_id: int
    user_id: int
    role: str
    is_active: bool
    joined_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
