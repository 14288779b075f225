from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.api.deps import get_actor_context, get_db, require_roles
from app.core.context import ActorContext
from app.core.exceptions import ConflictError, ForbiddenError, ResourceNotFoundError
from app.db.session import commit_or_raise
from app.models.calendar import Calendar, CalendarEvent, CalendarGroup
from app.models.event_type import EventType
from app.models.group import Group, GroupMembership
from app.models.user import User, UserRole
from app.schemas.calendar import (
    CalendarEventOut,
    CalendarEventPayload,
    CalendarGroupAssign,
    CalendarOut,
    CalendarPayload,
    CanEditOut,
    DateRemovalOut,
    EventMutationOut,
    RemoveEventDatePayload,
)
from app.schemas.common import SuccessOut
from app.schemas.group import GroupOut
from app.services import calendar_events
from app.services.permissions import can_edit_calendar, can_view_calendar
from app.services.view_invalidation import CALENDARS_VIEW, DASHBOARD_VIEW, mark_view_stale

router = APIRouter()


def _event_out(db: Session, event: CalendarEvent, type_names: dict[str, str] | None = None) -> CalendarEventOut:
    if type_names is None:
        event_type = db.get(EventType, event.event_type_id)
        type_name = event_type.name if event_type is not None else None
    else:
        type_name = type_names.get(event.event_type_id)
    out = CalendarEventOut.model_validate(event)
    out.event_type_name = type_name
    return out


def _calendar_out(db: Session, calendar: Calendar) -> CalendarOut:
    events = list(
        db.execute(
            select(CalendarEvent)
            .where(CalendarEvent.calendar_id == calendar.id)
            .order_by(CalendarEvent.start_date, CalendarEvent.id)
        ).scalars()
    )
    type_names = dict(db.execute(select(EventType.id, EventType.name)).all())
    groups = list(
        db.execute(
            select(Group)
            .join(CalendarGroup, CalendarGroup.group_id == Group.id)
            .where(CalendarGroup.calendar_id == calendar.id)
            .order_by(Group.title)
        ).scalars()
    )
    creator = db.get(User, calendar.created_by_id)
    return CalendarOut(
        id=calendar.id,
        name=calendar.name,
        description=calendar.description,
        created_by_id=calendar.created_by_id,
        created_by_name=creator.name if creator is not None else None,
        created_at=calendar.created_at,
        events=[_event_out(db, event, type_names) for event in events],
        groups=[GroupOut.model_validate(group) for group in groups],
    )


def _get_calendar(db: Session, calendar_id: str) -> Calendar:
    calendar = db.get(Calendar, calendar_id)
    if calendar is None:
        raise ResourceNotFoundError("Calendar", calendar_id)
    return calendar


@router.get("/", response_model=list[CalendarOut])
def list_calendars(
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> list[CalendarOut]:
    query = select(Calendar).order_by(Calendar.created_at.desc(), Calendar.id)
    if not actor.is_hod:
        visible = (
            select(CalendarGroup.calendar_id)
            .join(GroupMembership, GroupMembership.group_id == CalendarGroup.group_id)
            .where(GroupMembership.user_id == actor.user_id)
        )
        query = query.where(Calendar.id.in_(visible))
    return [_calendar_out(db, calendar) for calendar in db.execute(query).scalars()]


@router.post("/", response_model=CalendarOut, status_code=status.HTTP_201_CREATED)
def create_calendar(
    payload: CalendarPayload,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> CalendarOut:
    calendar = Calendar(name=payload.name, description=payload.description, created_by_id=current_user.id)
    db.add(calendar)
    commit_or_raise(db, operation="Create calendar")
    db.refresh(calendar)
    mark_view_stale(CALENDARS_VIEW)
    return _calendar_out(db, calendar)


@router.get("/{calendar_id}", response_model=CalendarOut)
def get_calendar(
    calendar_id: str,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> CalendarOut:
    calendar = _get_calendar(db, calendar_id)
    if not can_view_calendar(db, actor.user_id, calendar_id, role=actor.role):
        raise ResourceNotFoundError("Calendar", calendar_id)
    return _calendar_out(db, calendar)


@router.put("/{calendar_id}", response_model=CalendarOut)
def update_calendar(
    calendar_id: str,
    payload: CalendarPayload,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> CalendarOut:
    calendar = _get_calendar(db, calendar_id)
    if not can_edit_calendar(db, actor.user_id, calendar_id, role=actor.role):
        raise ForbiddenError(calendar_events.NO_EDIT_PERMISSION)
    calendar.name = payload.name
    calendar.description = payload.description
    commit_or_raise(db, operation="Update calendar")
    db.refresh(calendar)
    mark_view_stale(CALENDARS_VIEW)
    return _calendar_out(db, calendar)


@router.delete("/{calendar_id}", response_model=SuccessOut)
def delete_calendar(
    calendar_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    calendar = _get_calendar(db, calendar_id)
    db.execute(delete(CalendarEvent).where(CalendarEvent.calendar_id == calendar_id))
    db.execute(delete(CalendarGroup).where(CalendarGroup.calendar_id == calendar_id))
    db.delete(calendar)
    commit_or_raise(db, operation="Delete calendar")
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return SuccessOut()


@router.get("/{calendar_id}/can-edit", response_model=CanEditOut)
def check_can_edit_calendar(
    calendar_id: str,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> CanEditOut:
    return CanEditOut(can_edit=can_edit_calendar(db, actor.user_id, calendar_id, role=actor.role))


@router.post("/{calendar_id}/groups", response_model=SuccessOut, status_code=status.HTTP_201_CREATED)
def assign_group_to_calendar(
    calendar_id: str,
    payload: CalendarGroupAssign,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    _get_calendar(db, calendar_id)
    if db.get(Group, payload.group_id) is None:
        raise ResourceNotFoundError("Group", payload.group_id)
    existing = db.execute(
        select(CalendarGroup).where(
            CalendarGroup.calendar_id == calendar_id,
            CalendarGroup.group_id == payload.group_id,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise ConflictError("This group is already assigned to this calendar")

    db.add(CalendarGroup(calendar_id=calendar_id, group_id=payload.group_id))
    commit_or_raise(
        db,
        operation="Assign group to calendar",
        conflict_message="This group is already assigned to this calendar",
    )
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return SuccessOut()


@router.delete("/{calendar_id}/groups/{group_id}", response_model=SuccessOut)
def remove_group_from_calendar(
    calendar_id: str,
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    assignment = db.execute(
        select(CalendarGroup).where(CalendarGroup.calendar_id == calendar_id, CalendarGroup.group_id == group_id)
    ).scalar_one_or_none()
    if assignment is None:
        raise ResourceNotFoundError("CalendarGroup", f"{calendar_id}:{group_id}")
    db.delete(assignment)
    commit_or_raise(db, operation="Remove group from calendar")
    mark_view_stale(CALENDARS_VIEW, DASHBOARD_VIEW)
    return SuccessOut()


@router.post("/{calendar_id}/events", response_model=EventMutationOut, status_code=status.HTTP_201_CREATED)
def add_calendar_event(
    calendar_id: str,
    payload: CalendarEventPayload,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> EventMutationOut:
    event = calendar_events.add_event(db, actor, calendar_id, payload)
    return EventMutationOut(event=_event_out(db, event))


@router.put("/events/{event_id}", response_model=EventMutationOut)
def update_calendar_event(
    event_id: str,
    payload: CalendarEventPayload,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> EventMutationOut:
    event = calendar_events.update_event(db, actor, event_id, payload)
    return EventMutationOut(event=_event_out(db, event))


@router.delete("/events/{event_id}", response_model=SuccessOut)
def delete_calendar_event(
    event_id: str,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> SuccessOut:
    calendar_events.delete_event(db, actor, event_id)
    return SuccessOut()


@router.post("/events/{event_id}/remove-date", response_model=DateRemovalOut)
def remove_event_from_date(
    event_id: str,
    payload: RemoveEventDatePayload,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> DateRemovalOut:
    action, survivors = calendar_events.remove_event_from_date(db, actor, event_id, payload.date)
    return DateRemovalOut(action=action, events=[_event_out(db, event) for event in survivors])
