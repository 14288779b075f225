"""Calendar event editing, including removal of a single date from a multi-day event.

All dates are `datetime.date` values: day arithmetic uses `timedelta(days=1)`
and no timezone conversion ever takes place. Every operation takes the caller
as an explicit `ActorContext` and checks edit permission on the calendar that
owns the event before touching the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
import logging
from typing import Literal

from sqlalchemy.orm import Session

from app.core.context import ActorContext
from app.core.exceptions import (
    EventDateNotFoundError,
    ForbiddenError,
    ResourceNotFoundError,
    ValidationError,
)
from app.db.session import commit_or_raise, persistence_guard
from app.models.calendar import Calendar, CalendarEvent
from app.models.event_type import EventType
from app.schemas.calendar import CalendarEventPayload
from app.services.permissions import can_edit_calendar
from app.services.view_invalidation import CALENDARS_VIEW, DASHBOARD_VIEW, mark_view_stale

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
NO_EDIT_PERMISSION = "You don't have permission to edit this calendar"


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date | None

    @classmethod
    def normalized(cls, start: date, end: date) -> "DateRange":
        """Build a range whose single-day form stores no end date."""
        return cls(start=start, end=None if end == start else end)


@dataclass(frozen=True)
class DateRemovalPlan:
    action: Literal["delete", "update", "split"]
    keep: DateRange | None = None
    split_off: DateRange | None = None


def plan_date_removal(start: date, end: date | None, target: date) -> DateRemovalPlan:
    """Decide how the event range [start, end] changes when `target` is removed.

    Raises `ValueError` when `target` lies outside the range.
    """
    last = end or start
    if target < start or target > last:
        raise ValueError(f"{target.isoformat()} is outside {start.isoformat()}..{last.isoformat()}")

    if start == last:
        return DateRemovalPlan(action="delete")

    if target == start:
        return DateRemovalPlan(action="update", keep=DateRange.normalized(start + ONE_DAY, last))

    if target == last:
        return DateRemovalPlan(action="update", keep=DateRange.normalized(start, last - ONE_DAY))

    return DateRemovalPlan(
        action="split",
        keep=DateRange.normalized(start, target - ONE_DAY),
        split_off=DateRange.normalized(target + ONE_DAY, last),
    )


def _require_edit(db: Session, actor: ActorContext, calendar_id: str) -> None:
    if not can_edit_calendar(db, actor.user_id, calendar_id, role=actor.role):
        logger.info("User %s denied edit on calendar %s", actor.user_id, calendar_id)
        raise ForbiddenError(NO_EDIT_PERMISSION)


def _require_event_type(db: Session, event_type_id: str) -> None:
    if db.get(EventType, event_type_id) is None:
        raise ValidationError("Event type not found", details={"event_type_id": event_type_id})


def _get_event(db: Session, event_id: str) -> CalendarEvent:
    event = db.get(CalendarEvent, event_id)
    if event is None:
        raise ResourceNotFoundError("CalendarEvent", event_id)
    return event


def add_event(db: Session, actor: ActorContext, calendar_id: str, payload: CalendarEventPayload) -> CalendarEvent:
    with persistence_guard(db, operation="Add calendar event"):
        if db.get(Calendar, calendar_id) is None:
            raise ResourceNotFoundError("Calendar", calendar_id)
        _require_edit(db, actor, calendar_id)
        _require_event_type(db, payload.event_type_id)

        event = CalendarEvent(
            calendar_id=calendar_id,
            title=payload.title,
            description=payload.description,
            start_date=payload.start_date,
            end_date=payload.end_date,
            event_type_id=payload.event_type_id,
        )
        db.add(event)
        commit_or_raise(db, operation="Add calendar event")
        db.refresh(event)
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return event


def update_event(db: Session, actor: ActorContext, event_id: str, payload: CalendarEventPayload) -> CalendarEvent:
    with persistence_guard(db, operation="Update calendar event"):
        event = _get_event(db, event_id)
        # Scope comes from the stored event, never from the caller.
        _require_edit(db, actor, event.calendar_id)
        _require_event_type(db, payload.event_type_id)

        event.title = payload.title
        event.description = payload.description
        event.start_date = payload.start_date
        event.end_date = payload.end_date
        event.event_type_id = payload.event_type_id
        commit_or_raise(db, operation="Update calendar event")
        db.refresh(event)
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return event


def delete_event(db: Session, actor: ActorContext, event_id: str) -> None:
    with persistence_guard(db, operation="Delete calendar event"):
        event = _get_event(db, event_id)
        _require_edit(db, actor, event.calendar_id)

        db.delete(event)
        commit_or_raise(db, operation="Delete calendar event")
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)


def remove_event_from_date(
    db: Session,
    actor: ActorContext,
    event_id: str,
    target: date,
) -> tuple[str, list[CalendarEvent]]:
    """Remove one date from an event, returning the action taken and the surviving events."""
    with persistence_guard(db, operation="Remove event from date"):
        event = _get_event(db, event_id)
        _require_edit(db, actor, event.calendar_id)

        try:
            plan = plan_date_removal(event.start_date, event.end_date, target)
        except ValueError as exc:
            raise EventDateNotFoundError(event_id, target.isoformat()) from exc

        survivors: list[CalendarEvent] = []
        if plan.action == "delete":
            db.delete(event)
            action = "deleted"
        else:
            event.start_date = plan.keep.start
            event.end_date = plan.keep.end
            survivors.append(event)
            action = "updated"
            if plan.split_off is not None:
                second = CalendarEvent(
                    calendar_id=event.calendar_id,
                    title=event.title,
                    description=event.description,
                    start_date=plan.split_off.start,
                    end_date=plan.split_off.end,
                    event_type_id=event.event_type_id,
                )
                db.add(second)
                survivors.append(second)
                action = "split"

        # Shrink and create land in the same transaction.
        commit_or_raise(db, operation="Remove event from date")
        for item in survivors:
            db.refresh(item)
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return action, survivors
