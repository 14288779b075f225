from datetime import date

from pydantic import BaseModel, Field

from app.models.timetable import DayOfWeek
from app.schemas.lecture_summary import LectureSummaryOut


class ScheduleSlot(BaseModel):
    id: str
    day: DayOfWeek
    start_time: str
    end_time: str
    subject_name: str | None = None
    subject_short_name: str | None = None
    slot_type_name: str
    room_number: str | None = None
    faculty_name: str | None = None
    batch_name: str | None = None
    is_break: bool


class DayEvent(BaseModel):
    id: str
    title: str
    description: str | None = None
    event_type_name: str
    start_date: date
    end_date: date | None = None


class UserSchedule(BaseModel):
    weekly_schedule: dict[DayOfWeek, list[ScheduleSlot]]
    today_date: date
    user_name: str
    user_role: str
    slot_summaries: dict[str, list[str]] = Field(default_factory=dict)
    day_events: dict[str, list[DayEvent]] = Field(default_factory=dict)


class SlotWithSummary(ScheduleSlot):
    has_summary: bool = False
    can_edit: bool = False
    summary: LectureSummaryOut | None = None


class DaySummarySchedule(BaseModel):
    day: DayOfWeek
    date: date
    slots: list[SlotWithSummary] = Field(default_factory=list)
    user_role: str
    can_edit: bool
