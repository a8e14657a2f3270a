"""Operational audit trail: structured ops events."""

from .ops_events import (
    log_feedback_submitted,
    log_mentor_rating_updated,
    log_mentor_verification,
    log_rate_limit_rejected,
    log_session_booked,
    log_session_status_changed,
    log_user_registered,
    log_user_status_changed,
)

__all__ = [
    "log_feedback_submitted",
    "log_mentor_rating_updated",
    "log_mentor_verification",
    "log_rate_limit_rejected",
    "log_session_booked",
    "log_session_status_changed",
    "log_user_registered",
    "log_user_status_changed",
]
