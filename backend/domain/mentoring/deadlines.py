"""Derived deadline fields for resources (scholarship application dates)."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Mapping, Optional

from models.base import as_utc


def parse_deadline(value: Any) -> Optional[datetime]:
    """Deadlines are stored as ISO strings inside the JSON ``deadlines`` column."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    try:
        return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        return None


def days_until_deadline(deadlines: Optional[Mapping[str, Any]], now: datetime) -> Optional[int]:
    """Whole days (rounded up) until the application deadline; negative once passed."""
    deadline = parse_deadline((deadlines or {}).get("application"))
    if deadline is None:
        return None
    return math.ceil((deadline - as_utc(now)).total_seconds() / 86400)


def deadline_status(deadlines: Optional[Mapping[str, Any]], now: datetime) -> str:
    days = days_until_deadline(deadlines, now)
    if days is None:
        return "no-deadline"
    if days < 0:
        return "expired"
    if days <= 7:
        return "urgent"
    if days <= 30:
        return "soon"
    return "normal"
