"""
Structured ops events for session life cycle, moderation and rate limiting.
Log-level + structured event dict; ids only, never message bodies or credentials.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

OPS_LOGGER_NAME = "ops_events"


def _logger() -> logging.Logger:
    return logging.getLogger(OPS_LOGGER_NAME)


def _event(event_type: str, **kwargs: Any) -> None:
    """Emit a structured ops event (sorted keys)."""
    msg = f"ops_event={event_type} " + " ".join(f"{k}={v!r}" for k, v in sorted(kwargs.items()))
    _logger().info(msg, extra={"ops_event_type": event_type, "ops_event": {**kwargs}})


def log_user_registered(user_id: str, role: str) -> None:
    _event("user_registered", user_id=user_id, role=role)


def log_session_booked(session_id: str, student_id: str, mentor_id: str, duration: int) -> None:
    _event(
        "session_booked",
        session_id=session_id,
        student_id=student_id,
        mentor_id=mentor_id,
        duration=duration,
    )


def log_session_status_changed(
    session_id: str,
    from_status: str,
    to_status: str,
    actor: str,
) -> None:
    """Log a life-cycle transition; actor is mentor | student | admin."""
    _event(
        "session_status_changed",
        session_id=session_id,
        from_status=from_status,
        to_status=to_status,
        actor=actor,
    )


def log_feedback_submitted(session_id: str, side: str, rating: int) -> None:
    _event("feedback_submitted", session_id=session_id, side=side, rating=rating)


def log_mentor_rating_updated(mentor_id: str, rating_average: float, total_reviews: int) -> None:
    _event(
        "mentor_rating_updated",
        mentor_id=mentor_id,
        rating_average=rating_average,
        total_reviews=total_reviews,
    )


def log_mentor_verification(
    mentor_id: str,
    decision: str,
    admin_id: str,
    reason: str | None = None,
) -> None:
    payload: Dict[str, Any] = {"mentor_id": mentor_id, "decision": decision, "admin_id": admin_id}
    if reason:
        payload["reason"] = reason
    _event("mentor_verification", **payload)


def log_user_status_changed(user_id: str, status: str, admin_id: str) -> None:
    _event("user_status_changed", user_id=user_id, status=status, admin_id=admin_id)


def log_rate_limit_rejected(client: str, scope: str, limit: int, path: str) -> None:
    """Log a request refused by the rate limiter (scope is general | auth)."""
    _event("rate_limit_rejected", client=client, scope=scope, limit=limit, path=path)
