from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.timetable import DayOfWeek
from app.schemas.common import TIME_PATTERN, parse_time_to_minutes, trim_to_none


class TimetableCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Timetable name is required")
        return trimmed

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return trim_to_none(value)


class TimetableOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_by_id: str
    group_ids: list[str] = Field(default_factory=list)
    slot_count: int = 0


class NamedItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Name is required")
        return trimmed


class NamedItemOut(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class TimetableSlotCreate(BaseModel):
    day: DayOfWeek
    start_time: str
    end_time: str
    slot_type_id: str = Field(min_length=1, max_length=36)
    subject_name: str | None = Field(default=None, max_length=200)
    subject_short_name: str | None = Field(default=None, max_length=50)
    room_number: str | None = Field(default=None, max_length=50)
    faculty_id: str | None = Field(default=None, max_length=36)
    batch_id: str | None = Field(default=None, max_length=36)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @field_validator("subject_name", "subject_short_name", "room_number", "faculty_id", "batch_id")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return trim_to_none(value)

    @model_validator(mode="after")
    def validate_order(self) -> "TimetableSlotCreate":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class TimetableSlotOut(BaseModel):
    id: str
    timetable_id: str
    day: DayOfWeek
    start_time: str
    end_time: str
    slot_type_id: str
    subject_name: str | None = None
    subject_short_name: str | None = None
    room_number: str | None = None
    faculty_id: str | None = None
    batch_id: str | None = None
    is_break: bool

    model_config = {"from_attributes": True}


class TimetableGroupAssign(BaseModel):
    group_id: str = Field(min_length=1, max_length=36)
