from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.session import persistence_guard
from app.models.preference import StudentPreference


@dataclass(frozen=True)
class ActivePreferences:
    enabled_slot_type_ids: list[str] | None = None
    selected_batch_ids: list[str] | None = None

    def allows(self, slot_type_id: str, batch_id: str | None) -> bool:
        if self.enabled_slot_type_ids is not None and slot_type_id not in self.enabled_slot_type_ids:
            return False
        # Slots without a batch are never hidden by batch selection.
        if self.selected_batch_ids is not None and batch_id and batch_id not in self.selected_batch_ids:
            return False
        return True

def get_active_preferences(db: Session, user_id: str) -> ActivePreferences:
    with persistence_guard(db, operation="Load student preferences"):
        record = db.execute(
            select(StudentPreference).where(StudentPreference.user_id == user_id)
        ).scalar_one_or_none()
    if record is None:
        return ActivePreferences()
    return ActivePreferences(
        enabled_slot_type_ids=list(record.enabled_slot_type_ids) if record.enabled_slot_type_ids is not None else None,
        selected_batch_ids=list(record.selected_batch_ids) if record.selected_batch_ids is not None else None,
    )
