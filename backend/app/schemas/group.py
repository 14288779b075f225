from pydantic import BaseModel, Field, field_validator

from app.models.group import GroupRole
from app.schemas.common import trim_to_none


class GroupCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    default_role: GroupRole = GroupRole.viewer

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Group title is required")
        return trimmed

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return trim_to_none(value)


class GroupOut(BaseModel):
    id: str
    title: str
    description: str | None = None
    default_role: GroupRole

    model_config = {"from_attributes": True}


class GroupMemberAdd(BaseModel):
    user_id: str = Field(min_length=1, max_length=36)
    role: GroupRole | None = None


class GroupMemberUpdate(BaseModel):
    role: GroupRole | None = None


class GroupMemberOut(BaseModel):
    id: str
    group_id: str
    user_id: str
    user_name: str | None = None
    role: GroupRole | None = None
    effective_role: GroupRole
