from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import coerce_calendar_date, trim_to_none


class LectureSummaryUpsert(BaseModel):
    slot_id: str = Field(min_length=1, max_length=36)
    date: date
    content: str = Field(max_length=20000)
    notes: str | None = Field(default=None, max_length=5000)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return coerce_calendar_date(value)

    @field_validator("content")
    @classmethod
    def normalize_content(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Summary content is required")
        return trimmed

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, value: str | None) -> str | None:
        return trim_to_none(value)


class LectureSummaryOut(BaseModel):
    id: str
    slot_id: str
    date: date
    content: str
    notes: str | None = None
    author_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
