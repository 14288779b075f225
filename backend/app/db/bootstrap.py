from __future__ import annotations

import logging

from sqlalchemy import inspect

import app.models  # noqa: F401
from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "email", "role"},
    "groups": {"id", "title", "default_role"},
    "group_memberships": {"id", "group_id", "user_id", "role"},
    "calendars": {"id", "name", "created_by_id"},
    "calendar_groups": {"id", "calendar_id", "group_id"},
    "calendar_events": {"id", "calendar_id", "start_date", "end_date", "event_type_id"},
    "event_types": {"id", "name"},
    "timetable_slots": {"id", "timetable_id", "day", "start_time", "slot_type_id", "batch_id"},
    "lecture_summaries": {"id", "slot_id", "date"},
    "student_preferences": {"id", "user_id", "enabled_slot_type_ids", "selected_batch_ids"},
}


def missing_schema_items(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(required - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_runtime_schema_compatibility() -> None:
    try:
        with engine.begin() as connection:
            # Create missing tables before checking columns on long-lived databases.
            Base.metadata.create_all(bind=connection)
            missing_tables, missing_columns = missing_schema_items(connection)
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
        if missing_columns:
            flattened = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
            raise RuntimeError(f"Missing required columns: {', '.join(flattened)}")
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
