from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.core.exceptions import ValidationError
from app.db.session import commit_or_raise
from app.models.preference import StudentPreference
from app.models.timetable import Batch, SlotType
from app.models.user import User, UserRole
from app.schemas.preference import PreferencesOut, PreferencesUpdate
from app.services.preferences import get_active_preferences
from app.services.view_invalidation import DASHBOARD_VIEW, mark_view_stale

router = APIRouter()


def _unknown_ids(db: Session, model, ids: list[str] | None) -> list[str]:
    if not ids:
        return []
    known = set(db.execute(select(model.id).where(model.id.in_(ids))).scalars())
    return [item for item in ids if item not in known]


@router.get("/preferences/me", response_model=PreferencesOut)
def get_my_preferences(
    current_user: User = Depends(require_roles(UserRole.student)),
    db: Session = Depends(get_db),
) -> PreferencesOut:
    active = get_active_preferences(db, current_user.id)
    return PreferencesOut(
        enabled_slot_type_ids=active.enabled_slot_type_ids,
        selected_batch_ids=active.selected_batch_ids,
    )


@router.put("/preferences/me", response_model=PreferencesOut)
def replace_my_preferences(
    payload: PreferencesUpdate,
    current_user: User = Depends(require_roles(UserRole.student)),
    db: Session = Depends(get_db),
) -> PreferencesOut:
    unknown_slot_types = _unknown_ids(db, SlotType, payload.enabled_slot_type_ids)
    if unknown_slot_types:
        raise ValidationError("Unknown slot type", details={"slot_type_ids": unknown_slot_types})
    unknown_batches = _unknown_ids(db, Batch, payload.selected_batch_ids)
    if unknown_batches:
        raise ValidationError("Unknown batch", details={"batch_ids": unknown_batches})

    record = db.execute(
        select(StudentPreference).where(StudentPreference.user_id == current_user.id)
    ).scalar_one_or_none()
    if record is None:
        record = StudentPreference(user_id=current_user.id)
        db.add(record)
    record.enabled_slot_type_ids = payload.enabled_slot_type_ids
    record.selected_batch_ids = payload.selected_batch_ids
    commit_or_raise(db, operation="Save preferences")
    mark_view_stale(DASHBOARD_VIEW)
    return PreferencesOut(
        enabled_slot_type_ids=payload.enabled_slot_type_ids,
        selected_batch_ids=payload.selected_batch_ids,
    )
