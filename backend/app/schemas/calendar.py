from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import coerce_calendar_date, trim_to_none
from app.schemas.group import GroupOut

CALENDAR_NAME_MAX_LENGTH = 100
EVENT_TITLE_MAX_LENGTH = 200


class CalendarPayload(BaseModel):
    name: str = Field(max_length=1000)
    description: str | None = Field(default=None, max_length=5000)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Calendar name is required")
        if len(trimmed) > CALENDAR_NAME_MAX_LENGTH:
            raise ValueError(f"Calendar name must be {CALENDAR_NAME_MAX_LENGTH} characters or less")
        return trimmed

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return trim_to_none(value)


class CalendarEventPayload(BaseModel):
    title: str = Field(max_length=1000)
    description: str | None = Field(default=None, max_length=5000)
    start_date: date
    end_date: date | None = None
    event_type_id: str = Field(min_length=1, max_length=36)

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Event title is required")
        if len(trimmed) > EVENT_TITLE_MAX_LENGTH:
            raise ValueError(f"Event title must be {EVENT_TITLE_MAX_LENGTH} characters or less")
        return trimmed

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return trim_to_none(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, value):
        return coerce_calendar_date(value)

    @model_validator(mode="after")
    def validate_range(self) -> "CalendarEventPayload":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        if self.end_date == self.start_date:
            self.end_date = None
        return self


class RemoveEventDatePayload(BaseModel):
    date: date

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return coerce_calendar_date(value)


class CalendarEventOut(BaseModel):
    id: str
    calendar_id: str
    title: str
    description: str | None = None
    start_date: date
    end_date: date | None = None
    event_type_id: str
    event_type_name: str | None = None

    model_config = {"from_attributes": True}


class CalendarOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_by_id: str
    created_by_name: str | None = None
    created_at: datetime | None = None
    events: list[CalendarEventOut] = Field(default_factory=list)
    groups: list[GroupOut] = Field(default_factory=list)


class CalendarGroupAssign(BaseModel):
    group_id: str = Field(min_length=1, max_length=36)


class EventMutationOut(BaseModel):
    success: bool = True
    event: CalendarEventOut | None = None


class DateRemovalOut(BaseModel):
    success: bool = True
    action: Literal["deleted", "updated", "split"]
    events: list[CalendarEventOut] = Field(default_factory=list)


class CanEditOut(BaseModel):
    can_edit: bool
