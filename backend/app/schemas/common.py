from __future__ import annotations

from datetime import datetime
import re
from typing import Any

from pydantic import BaseModel

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)

def coerce_calendar_date(value: Any) -> Any:
    """Reduce ISO date or datetime input to its calendar date, ignoring time and zone."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if "T" in text or " " in text:
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                return text
        return text
    return value

def trim_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None

class SuccessOut(BaseModel):
    success: bool = True
