from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_actor_context, get_db
from app.core.context import ActorContext
from app.schemas.schedule import UserSchedule
from app.services.schedule import build_user_schedule

router = APIRouter()


@router.get("/schedule/me", response_model=UserSchedule)
def get_my_schedule(
    today: date | None = Query(default=None),
    actor: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
) -> UserSchedule:
    return build_user_schedule(db, actor, today=today)
