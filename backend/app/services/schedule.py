"""Weekly schedule read-model for the dashboard.

Combines the recurring timetable slots a user should see with the lecture
summaries and calendar events that fall inside a rolling window around today,
and the single-day lecture list used by the summaries page.
Nothing here writes to the store.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.context import ActorContext
from app.db.session import persistence_guard
from app.models.calendar import CalendarEvent, CalendarGroup
from app.models.event_type import EventType
from app.models.lecture_summary import LectureSummary
from app.models.timetable import DAYS_ORDER, Batch, DayOfWeek, SlotType, TimetableGroup, TimetableSlot
from app.models.user import User, UserRole
from app.schemas.lecture_summary import LectureSummaryOut
from app.schemas.schedule import DayEvent, DaySummarySchedule, ScheduleSlot, SlotWithSummary, UserSchedule
from app.services.permissions import user_group_ids
from app.services.preferences import get_active_preferences


def empty_week() -> dict[DayOfWeek, list]:
    return {day: [] for day in DAYS_ORDER}


def schedule_window(today: date, days: int) -> tuple[date, date]:
    return today - timedelta(days=days), today + timedelta(days=days)


def _slots_for_groups(db: Session, group_ids: list[str]) -> list[TimetableSlot]:
    if not group_ids:
        return []
    rows = db.execute(
        select(TimetableSlot)
        .join(TimetableGroup, TimetableGroup.timetable_id == TimetableSlot.timetable_id)
        .where(TimetableGroup.group_id.in_(group_ids))
        .order_by(TimetableSlot.start_time, TimetableSlot.id)
    ).scalars()
    # One slot can reach the user through several timetable assignments.
    unique: dict[str, TimetableSlot] = {}
    for slot in rows:
        unique.setdefault(slot.id, slot)
    return list(unique.values())


def filter_slots(db: Session, actor: ActorContext, slots: Iterable[TimetableSlot]) -> list[TimetableSlot]:
    if actor.role in {UserRole.hod, UserRole.faculty}:
        return [slot for slot in slots if slot.faculty_id == actor.user_id]

    preferences = get_active_preferences(db, actor.user_id)
    return [slot for slot in slots if preferences.allows(slot.slot_type_id, slot.batch_id)]


def group_by_day(slots: Iterable[ScheduleSlot]) -> dict[DayOfWeek, list[ScheduleSlot]]:
    week = empty_week()
    for slot in slots:
        week[slot.day].append(slot)
    for day in DAYS_ORDER:
        # HH:MM is fixed width, so string order is time order; sort is stable for ties.
        week[day].sort(key=lambda item: item.start_time)
    return week


def _names_by_id(db: Session, model, ids: set[str]) -> dict[str, str]:
    if not ids:
        return {}
    return dict(db.execute(select(model.id, model.name).where(model.id.in_(ids))).all())


def _to_schedule_slots(db: Session, slots: list[TimetableSlot]) -> list[ScheduleSlot]:
    slot_type_names = _names_by_id(db, SlotType, {slot.slot_type_id for slot in slots})
    batch_names = _names_by_id(db, Batch, {slot.batch_id for slot in slots if slot.batch_id})
    faculty_names = _names_by_id(db, User, {slot.faculty_id for slot in slots if slot.faculty_id})
    return [
        ScheduleSlot(
            id=slot.id,
            day=slot.day,
            start_time=slot.start_time,
            end_time=slot.end_time,
            subject_name=slot.subject_name,
            subject_short_name=slot.subject_short_name,
            slot_type_name=slot_type_names.get(slot.slot_type_id, ""),
            room_number=slot.room_number,
            faculty_name=faculty_names.get(slot.faculty_id) if slot.faculty_id else None,
            batch_name=batch_names.get(slot.batch_id) if slot.batch_id else None,
            is_break=slot.is_break,
        )
        for slot in slots
    ]


def summary_dates_by_slot(db: Session, slot_ids: list[str], window_start: date, window_end: date) -> dict[str, list[str]]:
    if not slot_ids:
        return {}
    rows = db.execute(
        select(LectureSummary.slot_id, LectureSummary.date)
        .where(
            LectureSummary.slot_id.in_(slot_ids),
            LectureSummary.date >= window_start,
            LectureSummary.date <= window_end,
        )
        .order_by(LectureSummary.slot_id, LectureSummary.date)
    ).all()
    result: dict[str, list[str]] = defaultdict(list)
    for slot_id, summary_date in rows:
        result[slot_id].append(summary_date.isoformat())
    return dict(result)


def events_by_date(
    db: Session,
    actor: ActorContext,
    group_ids: list[str],
    window_start: date,
    window_end: date,
) -> dict[str, list[DayEvent]]:
    if actor.role != UserRole.hod and not group_ids:
        return {}

    query = (
        select(CalendarEvent, EventType.name)
        .outerjoin(EventType, EventType.id == CalendarEvent.event_type_id)
        .where(
            CalendarEvent.start_date <= window_end,
            func.coalesce(CalendarEvent.end_date, CalendarEvent.start_date) >= window_start,
        )
        .order_by(CalendarEvent.start_date, CalendarEvent.id)
    )
    if actor.role != UserRole.hod:
        visible_calendars = select(CalendarGroup.calendar_id).where(CalendarGroup.group_id.in_(group_ids))
        query = query.where(CalendarEvent.calendar_id.in_(visible_calendars))

    buckets: dict[str, list[DayEvent]] = defaultdict(list)
    seen: dict[str, set[str]] = defaultdict(set)
    for event, type_name in db.execute(query).all():
        day_event = DayEvent(
            id=event.id,
            title=event.title,
            description=event.description,
            event_type_name=type_name or "",
            start_date=event.start_date,
            end_date=event.end_date,
        )
        current = max(event.start_date, window_start)
        last = min(event.last_date, window_end)
        while current <= last:
            key = current.isoformat()
            if event.id not in seen[key]:
                seen[key].add(event.id)
                buckets[key].append(day_event)
            current += timedelta(days=1)
    return dict(buckets)


def build_user_schedule(db: Session, actor: ActorContext, today: date | None = None) -> UserSchedule:
    today = today or datetime.now(timezone.utc).date()
    window_start, window_end = schedule_window(today, get_settings().schedule_window_days)

    with persistence_guard(db, operation="Build user schedule"):
        group_ids = user_group_ids(db, actor.user_id)
        slots = filter_slots(db, actor, _slots_for_groups(db, group_ids))
        weekly = group_by_day(_to_schedule_slots(db, slots))

        user_name = db.execute(select(User.name).where(User.id == actor.user_id)).scalar_one_or_none()
        return UserSchedule(
            weekly_schedule=weekly,
            today_date=today,
            user_name=user_name or actor.name,
            user_role=actor.role.value,
            slot_summaries=summary_dates_by_slot(db, [slot.id for slot in slots], window_start, window_end),
            day_events=events_by_date(db, actor, group_ids, window_start, window_end),
        )


def day_of_week(on_date: date) -> DayOfWeek:
    return DAYS_ORDER[on_date.weekday()]


def build_day_summaries(db: Session, actor: ActorContext, on_date: date) -> DaySummarySchedule:
    """Lectures the actor sees on one calendar date, each with its summary for that date."""
    day = day_of_week(on_date)
    with persistence_guard(db, operation="Build lecture summaries for day"):
        group_ids = user_group_ids(db, actor.user_id)
        slots = [slot for slot in filter_slots(db, actor, _slots_for_groups(db, group_ids)) if slot.day == day]
        summaries: dict[str, LectureSummary] = {}
        if slots:
            rows = db.execute(
                select(LectureSummary).where(
                    LectureSummary.slot_id.in_([slot.id for slot in slots]),
                    LectureSummary.date == on_date,
                )
            ).scalars()
            summaries = {summary.slot_id: summary for summary in rows}

        entries = [
            SlotWithSummary(
                **schedule_slot.model_dump(),
                has_summary=schedule_slot.id in summaries,
                can_edit=actor.is_hod or slot.faculty_id == actor.user_id,
                summary=LectureSummaryOut.model_validate(summaries[slot.id]) if slot.id in summaries else None,
            )
            for slot, schedule_slot in zip(slots, _to_schedule_slots(db, slots))
        ]
    entries.sort(key=lambda item: item.start_time)
    return DaySummarySchedule(
        day=day,
        date=on_date,
        slots=entries,
        user_role=actor.role.value,
        can_edit=actor.role in {UserRole.hod, UserRole.faculty},
    )
