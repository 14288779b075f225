from app.models.calendar import Calendar, CalendarEvent, CalendarGroup  # noqa: F401
from app.models.event_type import EventType  # noqa: F401
from app.models.group import Group, GroupMembership, GroupRole  # noqa: F401
from app.models.lecture_summary import LectureSummary  # noqa: F401
from app.models.preference import StudentPreference  # noqa: F401
from app.models.timetable import (  # noqa: F401
    Batch,
    DayOfWeek,
    SlotType,
    Timetable,
    TimetableGroup,
    TimetableSlot,
)
from app.models.user import User, UserRole  # noqa: F401
