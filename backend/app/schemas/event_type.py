from pydantic import BaseModel, Field, field_validator

from app.schemas.common import trim_to_none


class EventTypeBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Event type name cannot be empty")
        if len(trimmed) > 50:
            raise ValueError("Event type name must be 50 characters or less")
        return trimmed

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return trim_to_none(value)


class EventTypeCreate(EventTypeBase):
    pass


class EventTypeUpdate(EventTypeBase):
    pass


class EventTypeOut(EventTypeBase):
    id: str

    model_config = {"from_attributes": True}
