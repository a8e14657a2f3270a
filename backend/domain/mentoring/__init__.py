"""
Mentoring domain rules: session life cycle, rating aggregation, quiz scoring.
Pure functions and value types; no database access.
"""

from domain.mentoring.lifecycle import (
    ACTIVE_BOOKING_STATES,
    TERMINAL_STATES,
    booking_window,
    can_transition,
    completion_stamp,
    is_terminal,
    meeting_identifier,
    meeting_link,
)
from domain.mentoring.quiz import CAREER_QUESTIONS, Answer, CareerScore, score_answers
from domain.mentoring.ratings import average_rating, round_half_up
from domain.mentoring.types import (
    FeedbackSide,
    Role,
    SessionStatus,
    SessionType,
    VerificationStatus,
)

__all__ = [
    "ACTIVE_BOOKING_STATES",
    "TERMINAL_STATES",
    "booking_window",
    "can_transition",
    "completion_stamp",
    "is_terminal",
    "meeting_identifier",
    "meeting_link",
    "CAREER_QUESTIONS",
    "Answer",
    "CareerScore",
    "score_answers",
    "average_rating",
    "round_half_up",
    "FeedbackSide",
    "Role",
    "SessionStatus",
    "SessionType",
    "VerificationStatus",
]
