"""
Session life cycle: allowed status transitions and the field stamping that goes with them.

scheduled -> confirmed -> in-progress -> completed
side exits: cancelled (any pre-completed state), no-show (scheduled / confirmed).
Terminal states never move again.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from domain.mentoring.types import FeedbackSide, SessionStatus

TERMINAL_STATES: FrozenSet[SessionStatus] = frozenset({
    SessionStatus.COMPLETED,
    SessionStatus.CANCELLED,
    SessionStatus.NO_SHOW,
})

# Statuses that block a new booking for the same student.
ACTIVE_BOOKING_STATES: Tuple[str, ...] = (
    SessionStatus.SCHEDULED.value,
    SessionStatus.CONFIRMED.value,
)

_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.SCHEDULED: frozenset({
        SessionStatus.CONFIRMED,
        SessionStatus.IN_PROGRESS,
        SessionStatus.COMPLETED,
        SessionStatus.CANCELLED,
        SessionStatus.NO_SHOW,
    }),
    SessionStatus.CONFIRMED: frozenset({
        SessionStatus.IN_PROGRESS,
        SessionStatus.COMPLETED,
        SessionStatus.CANCELLED,
        SessionStatus.NO_SHOW,
    }),
    SessionStatus.IN_PROGRESS: frozenset({
        SessionStatus.COMPLETED,
        SessionStatus.CANCELLED,
    }),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
    SessionStatus.NO_SHOW: frozenset(),
}


def is_terminal(status: str) -> bool:
    return SessionStatus(status) in TERMINAL_STATES


def can_transition(current: str, target: str) -> bool:
    """True if ``current -> target`` moves forward in the life cycle."""
    try:
        src = SessionStatus(current)
        dst = SessionStatus(target)
    except ValueError:
        return False
    return dst in _TRANSITIONS[src]


def booking_window(start: datetime, duration_minutes: int) -> Tuple[datetime, datetime]:
    """Half-open window ``[start, start + duration)`` used by the booking clash check.

    Only existing sessions that *start* inside this window count as a clash;
    a longer session that began earlier and is still running does not.
    """
    return start, start + timedelta(minutes=duration_minutes)


def meeting_identifier(session_id: str) -> str:
    return f"mentorship-{session_id}"


def meeting_link(base_url: str, session_id: str) -> str:
    return f"{base_url.rstrip('/')}/{meeting_identifier(session_id)}"


@dataclass(frozen=True)
class CompletionStamp:
    """Times recorded when a session is marked completed."""

    actual_start_time: datetime
    actual_end_time: datetime
    actual_duration: int  # minutes, never negative


def completion_stamp(
    scheduled_date: datetime,
    actual_start_time: Optional[datetime],
    actual_end_time: Optional[datetime],
    now: datetime,
) -> CompletionStamp:
    """Fill in missing actual times and derive the duration in whole minutes.

    A session never started explicitly is taken to have started on schedule.
    An end time already on record is kept.
    """
    end = actual_end_time or now
    start = actual_start_time or scheduled_date
    minutes = round((end - start).total_seconds() / 60)
    return CompletionStamp(
        actual_start_time=start,
        actual_end_time=end,
        actual_duration=max(0, minutes),
    )


def credited_minutes(actual_duration: Optional[int], scheduled_duration: int) -> int:
    """Minutes folded into running totals: the measured duration, else the booked one."""
    return actual_duration or scheduled_duration


def has_feedback(feedback: Optional[Mapping[str, Any]], side: FeedbackSide) -> bool:
    entry = (feedback or {}).get(side.value)
    return bool(entry and entry.get("rating"))


def feedback_entry(rating: int, comment: Optional[str], now: datetime) -> Dict[str, Any]:
    return {"rating": rating, "comment": comment, "submitted_at": now.isoformat()}


def cancellation_record(cancelled_by: str, reason: Optional[str], now: datetime) -> Dict[str, Any]:
    return {
        "cancelled_by": cancelled_by,
        "reason": reason or f"Cancelled by {cancelled_by}",
        "cancelled_at": now.isoformat(),
    }
