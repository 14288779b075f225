import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.core.exceptions import ConflictError, ResourceNotFoundError
from app.db.session import commit_or_raise
from app.models.calendar import CalendarEvent
from app.models.event_type import EventType
from app.models.user import User, UserRole
from app.schemas.common import SuccessOut
from app.schemas.event_type import EventTypeCreate, EventTypeOut, EventTypeUpdate
from app.services.view_invalidation import CALENDARS_VIEW, EVENT_TYPES_VIEW, mark_view_stale

router = APIRouter()
logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Event type name already exists"


def _ensure_unique_name(db: Session, name: str, exclude_id: str | None = None) -> None:
    query = select(EventType.id).where(EventType.name == name)
    if exclude_id is not None:
        query = query.where(EventType.id != exclude_id)
    if db.execute(query).first() is not None:
        raise ConflictError(DUPLICATE_NAME)


@router.get("/", response_model=list[EventTypeOut])
def list_event_types(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[EventTypeOut]:
    return list(db.execute(select(EventType).order_by(EventType.name)).scalars())


@router.post("/", response_model=EventTypeOut, status_code=status.HTTP_201_CREATED)
def create_event_type(
    payload: EventTypeCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> EventTypeOut:
    _ensure_unique_name(db, payload.name)
    event_type = EventType(name=payload.name, description=payload.description)
    db.add(event_type)
    commit_or_raise(db, operation="Create event type", conflict_message=DUPLICATE_NAME)
    db.refresh(event_type)
    mark_view_stale(EVENT_TYPES_VIEW, CALENDARS_VIEW)
    return event_type


@router.put("/{event_type_id}", response_model=EventTypeOut)
def update_event_type(
    event_type_id: str,
    payload: EventTypeUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> EventTypeOut:
    event_type = db.get(EventType, event_type_id)
    if event_type is None:
        raise ResourceNotFoundError("EventType", event_type_id)
    _ensure_unique_name(db, payload.name, exclude_id=event_type_id)
    event_type.name = payload.name
    event_type.description = payload.description
    commit_or_raise(db, operation="Update event type", conflict_message=DUPLICATE_NAME)
    db.refresh(event_type)
    mark_view_stale(EVENT_TYPES_VIEW, CALENDARS_VIEW)
    return event_type


@router.delete("/{event_type_id}", response_model=SuccessOut)
def delete_event_type(
    event_type_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    event_type = db.get(EventType, event_type_id)
    if event_type is None:
        raise ResourceNotFoundError("EventType", event_type_id)

    in_use = db.execute(
        select(func.count()).select_from(CalendarEvent).where(CalendarEvent.event_type_id == event_type_id)
    ).scalar_one()
    if in_use > 0:
        raise ConflictError(
            f"Cannot delete: {in_use} event(s) are using this type",
            details={"event_count": in_use},
        )

    db.delete(event_type)
    commit_or_raise(db, operation="Delete event type")
    logger.info("Event type %s deleted by %s", event_type_id, current_user.id)
    mark_view_stale(EVENT_TYPES_VIEW, CALENDARS_VIEW)
    return SuccessOut()
