from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_actor_context, get_db
from app.core.context import ActorContext
from app.core.exceptions import ForbiddenError, ResourceNotFoundError
from app.db.session import commit_or_raise
from app.models.lecture_summary import LectureSummary
from app.models.timetable import TimetableGroup, TimetableSlot
from app.schemas.common import SuccessOut
from app.schemas.lecture_summary import LectureSummaryOut, LectureSummaryUpsert
from app.schemas.schedule import DaySummarySchedule
from app.services.permissions import user_group_ids
from app.services.schedule import build_day_summaries
from app.services.view_invalidation import DASHBOARD_VIEW, LECTURE_SUMMARIES_VIEW, mark_view_stale

router = APIRouter()


def _get_slot(db: Session, slot_id: str) -> TimetableSlot:
    slot = db.get(TimetableSlot, slot_id)
    if slot is None:
        raise ResourceNotFoundError("TimetableSlot", slot_id)
    return slot


def _can_write(actor: ActorContext, slot: TimetableSlot) -> bool:
    return actor.is_hod or slot.faculty_id == actor.user_id


def _can_read(db: Session, actor: ActorContext, slot: TimetableSlot) -> bool:
    if _can_write(actor, slot):
        return True
    group_ids = user_group_ids(db, actor.user_id)
    if not group_ids:
        return False
    shared = db.execute(
        select(TimetableGroup.id).where(
            TimetableGroup.timetable_id == slot.timetable_id,
            TimetableGroup.group_id.in_(group_ids),
        )
    ).first()
    return shared is not None


@router.put("/lecture-summaries", response_model=LectureSummaryOut)
def upsert_lecture_summary(
    payload: LectureSummaryUpsert,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> LectureSummaryOut:
    slot = _get_slot(db, payload.slot_id)
    if not _can_write(actor, slot):
        raise ForbiddenError("Only the assigned faculty can write a summary for this lecture")

    summary = db.execute(
        select(LectureSummary).where(LectureSummary.slot_id == slot.id, LectureSummary.date == payload.date)
    ).scalar_one_or_none()
    if summary is None:
        summary = LectureSummary(slot_id=slot.id, date=payload.date, author_id=actor.user_id, content=payload.content)
        db.add(summary)
    summary.content = payload.content
    summary.notes = payload.notes
    commit_or_raise(
        db,
        operation="Save lecture summary",
        conflict_message="A summary for this lecture and date already exists",
    )
    db.refresh(summary)
    mark_view_stale(LECTURE_SUMMARIES_VIEW, DASHBOARD_VIEW)
    return summary


@router.get("/lecture-summaries/day/{summary_date}", response_model=DaySummarySchedule)
def get_day_summaries(
    summary_date: date,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> DaySummarySchedule:
    return build_day_summaries(db, actor, summary_date)


@router.get("/lecture-summaries/{slot_id}/{summary_date}", response_model=LectureSummaryOut)
def get_lecture_summary(
    slot_id: str,
    summary_date: date,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> LectureSummaryOut:
    slot = _get_slot(db, slot_id)
    if not _can_read(db, actor, slot):
        raise ForbiddenError("You don't have access to this lecture")
    summary = db.execute(
        select(LectureSummary).where(LectureSummary.slot_id == slot_id, LectureSummary.date == summary_date)
    ).scalar_one_or_none()
    if summary is None:
        raise ResourceNotFoundError("LectureSummary", f"{slot_id}:{summary_date.isoformat()}")
    return summary


@router.delete("/lecture-summaries/{summary_id}", response_model=SuccessOut)
def delete_lecture_summary(
    summary_id: str,
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> SuccessOut:
    summary = db.get(LectureSummary, summary_id)
    if summary is None:
        raise ResourceNotFoundError("LectureSummary", summary_id)
    if not actor.is_hod and summary.author_id != actor.user_id:
        raise ForbiddenError("Only the author can delete this summary")
    db.delete(summary)
    commit_or_raise(db, operation="Delete lecture summary")
    mark_view_stale(LECTURE_SUMMARIES_VIEW, DASHBOARD_VIEW)
    return SuccessOut()
