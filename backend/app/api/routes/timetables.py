from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.db.session import commit_or_raise
from app.models.group import Group
from app.models.lecture_summary import LectureSummary
from app.models.timetable import DAYS_ORDER, Batch, SlotType, Timetable, TimetableGroup, TimetableSlot
from app.models.user import User, UserRole
from app.schemas.common import SuccessOut
from app.schemas.timetable import (
    NamedItemCreate,
    NamedItemOut,
    TimetableCreate,
    TimetableGroupAssign,
    TimetableOut,
    TimetableSlotCreate,
    TimetableSlotOut,
)
from app.services.view_invalidation import DASHBOARD_VIEW, mark_view_stale

router = APIRouter()


def _get_timetable(db: Session, timetable_id: str) -> Timetable:
    timetable = db.get(Timetable, timetable_id)
    if timetable is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return timetable


def _timetable_out(db: Session, timetable: Timetable) -> TimetableOut:
    group_ids = list(
        db.execute(
            select(TimetableGroup.group_id)
            .where(TimetableGroup.timetable_id == timetable.id)
            .order_by(TimetableGroup.group_id)
        ).scalars()
    )
    slot_count = db.execute(
        select(func.count()).select_from(TimetableSlot).where(TimetableSlot.timetable_id == timetable.id)
    ).scalar_one()
    return TimetableOut(
        id=timetable.id,
        name=timetable.name,
        description=timetable.description,
        created_by_id=timetable.created_by_id,
        group_ids=group_ids,
        slot_count=slot_count,
    )


def _create_named(db: Session, model, payload: NamedItemCreate, label: str):
    if db.execute(select(model.id).where(model.name == payload.name)).first() is not None:
        raise ConflictError(f"{label} name already exists")
    item = model(name=payload.name)
    db.add(item)
    commit_or_raise(db, operation=f"Create {label.lower()}", conflict_message=f"{label} name already exists")
    db.refresh(item)
    return item


@router.get("/slot-types", response_model=list[NamedItemOut])
def list_slot_types(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[NamedItemOut]:
    return list(db.execute(select(SlotType).order_by(SlotType.name)).scalars())


@router.post("/slot-types", response_model=NamedItemOut, status_code=status.HTTP_201_CREATED)
def create_slot_type(
    payload: NamedItemCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> NamedItemOut:
    return _create_named(db, SlotType, payload, "Slot type")


@router.get("/batches", response_model=list[NamedItemOut])
def list_batches(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[NamedItemOut]:
    return list(db.execute(select(Batch).order_by(Batch.name)).scalars())


@router.post("/batches", response_model=NamedItemOut, status_code=status.HTTP_201_CREATED)
def create_batch(
    payload: NamedItemCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> NamedItemOut:
    return _create_named(db, Batch, payload, "Batch")


@router.get("/", response_model=list[TimetableOut])
def list_timetables(
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> list[TimetableOut]:
    timetables = db.execute(select(Timetable).order_by(Timetable.name, Timetable.id)).scalars()
    return [_timetable_out(db, timetable) for timetable in timetables]


@router.post("/", response_model=TimetableOut, status_code=status.HTTP_201_CREATED)
def create_timetable(
    payload: TimetableCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> TimetableOut:
    timetable = Timetable(name=payload.name, description=payload.description, created_by_id=current_user.id)
    db.add(timetable)
    commit_or_raise(db, operation="Create timetable")
    db.refresh(timetable)
    return _timetable_out(db, timetable)


@router.delete("/{timetable_id}", response_model=SuccessOut)
def delete_timetable(
    timetable_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    timetable = _get_timetable(db, timetable_id)
    slot_ids = select(TimetableSlot.id).where(TimetableSlot.timetable_id == timetable_id)
    db.execute(delete(LectureSummary).where(LectureSummary.slot_id.in_(slot_ids)))
    db.execute(delete(TimetableSlot).where(TimetableSlot.timetable_id == timetable_id))
    db.execute(delete(TimetableGroup).where(TimetableGroup.timetable_id == timetable_id))
    db.delete(timetable)
    commit_or_raise(db, operation="Delete timetable")
    mark_view_stale(DASHBOARD_VIEW)
    return SuccessOut()


@router.get("/{timetable_id}/slots", response_model=list[TimetableSlotOut])
def list_slots(
    timetable_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> list[TimetableSlotOut]:
    _get_timetable(db, timetable_id)
    slots = db.execute(select(TimetableSlot).where(TimetableSlot.timetable_id == timetable_id)).scalars()
    # Weekday order, not the alphabetical order of the stored day names.
    return sorted(slots, key=lambda slot: (DAYS_ORDER.index(slot.day), slot.start_time, slot.id))


@router.post("/{timetable_id}/slots", response_model=TimetableSlotOut, status_code=status.HTTP_201_CREATED)
def add_slot(
    timetable_id: str,
    payload: TimetableSlotCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> TimetableSlotOut:
    _get_timetable(db, timetable_id)
    if db.get(SlotType, payload.slot_type_id) is None:
        raise ValidationError("Slot type not found", details={"slot_type_id": payload.slot_type_id})
    if payload.batch_id is not None and db.get(Batch, payload.batch_id) is None:
        raise ValidationError("Batch not found", details={"batch_id": payload.batch_id})
    if payload.faculty_id is not None:
        faculty = db.get(User, payload.faculty_id)
        if faculty is None or faculty.role == UserRole.student:
            raise ValidationError("Assigned faculty must be a Faculty or HOD user", details={"faculty_id": payload.faculty_id})

    slot = TimetableSlot(timetable_id=timetable_id, **payload.model_dump())
    db.add(slot)
    commit_or_raise(db, operation="Add timetable slot")
    db.refresh(slot)
    mark_view_stale(DASHBOARD_VIEW)
    return slot


@router.delete("/slots/{slot_id}", response_model=SuccessOut)
def delete_slot(
    slot_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    slot = db.get(TimetableSlot, slot_id)
    if slot is None:
        raise ResourceNotFoundError("TimetableSlot", slot_id)
    db.execute(delete(LectureSummary).where(LectureSummary.slot_id == slot_id))
    db.delete(slot)
    commit_or_raise(db, operation="Delete timetable slot")
    mark_view_stale(DASHBOARD_VIEW)
    return SuccessOut()


@router.post("/{timetable_id}/groups", response_model=TimetableOut, status_code=status.HTTP_201_CREATED)
def assign_group_to_timetable(
    timetable_id: str,
    payload: TimetableGroupAssign,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> TimetableOut:
    timetable = _get_timetable(db, timetable_id)
    if db.get(Group, payload.group_id) is None:
        raise ResourceNotFoundError("Group", payload.group_id)
    existing = db.execute(
        select(TimetableGroup.id).where(
            TimetableGroup.timetable_id == timetable_id,
            TimetableGroup.group_id == payload.group_id,
        )
    ).first()
    if existing is not None:
        raise ConflictError("This group is already assigned to this timetable")

    db.add(TimetableGroup(timetable_id=timetable_id, group_id=payload.group_id))
    commit_or_raise(
        db,
        operation="Assign group to timetable",
        conflict_message="This group is already assigned to this timetable",
    )
    mark_view_stale(DASHBOARD_VIEW)
    return _timetable_out(db, timetable)


@router.delete("/{timetable_id}/groups/{group_id}", response_model=SuccessOut)
def remove_group_from_timetable(
    timetable_id: str,
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> SuccessOut:
    assignment = db.execute(
        select(TimetableGroup).where(TimetableGroup.timetable_id == timetable_id, TimetableGroup.group_id == group_id)
    ).scalar_one_or_none()
    if assignment is None:
        raise ResourceNotFoundError("TimetableGroup", f"{timetable_id}:{group_id}")
    db.delete(assignment)
    commit_or_raise(db, operation="Remove group from timetable")
    mark_view_stale(DASHBOARD_VIEW)
    return SuccessOut()
