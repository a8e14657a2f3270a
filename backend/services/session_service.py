"""Session life cycle: booking, transitions, cancellation, feedback and session chat.

Each function runs inside the caller's unit of work; nothing here commits.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.errors import BadRequestError, NotFoundError, PermissionDeniedError
from domain.mentoring.lifecycle import (
    ACTIVE_BOOKING_STATES,
    booking_window,
    can_transition,
    cancellation_record,
    completion_stamp,
    credited_minutes,
    feedback_entry,
    has_feedback,
    is_terminal,
    meeting_identifier,
    meeting_link,
)
from domain.mentoring.ratings import average_rating
from domain.mentoring.types import FeedbackSide, Role, SessionStatus, SessionType
from models.base import as_utc, utcnow
from models.mentor import Mentor
from models.session import MentoringSession
from models.student import Student
from models.user import User
from ops.ops_events import (
    log_feedback_submitted,
    log_mentor_rating_updated,
    log_session_booked,
    log_session_status_changed,
)
from repositories.mentor_repo import MentorRepository
from repositories.session_repo import SessionRepository
from repositories.student_repo import StudentRepository
from repositories.user_repo import UserRepository
from services.serializers import page_payload, session_dict

logger = logging.getLogger(__name__)


async def expand_sessions(
    session: AsyncSession, bookings: Sequence[MentoringSession]
) -> List[Dict[str, Any]]:
    """Serialize sessions with the student and mentor user summaries attached."""
    students: Dict[str, Student] = {}
    mentors: Dict[str, Mentor] = {}
    student_repo = StudentRepository(session)
    mentor_repo = MentorRepository(session)
    for booking in bookings:
        if booking.student_id not in students:
            student = await student_repo.get_by_id(booking.student_id)
            if student is not None:
                students[booking.student_id] = student
        if booking.mentor_id not in mentors:
            mentor = await mentor_repo.get_by_id(booking.mentor_id)
            if mentor is not None:
                mentors[booking.mentor_id] = mentor

    user_ids = [s.user_id for s in students.values()] + [m.user_id for m in mentors.values()]
    users = {u.id: u for u in await UserRepository(session).get_many(user_ids)}

    now = utcnow()
    out: List[Dict[str, Any]] = []
    for booking in bookings:
        student = students.get(booking.student_id)
        mentor = mentors.get(booking.mentor_id)
        out.append(
            session_dict(
                booking,
                student_user=users.get(student.user_id) if student else None,
                mentor_user=users.get(mentor.user_id) if mentor else None,
                now=now,
            )
        )
    return out


async def session_payload(session: AsyncSession, booking: MentoringSession) -> Dict[str, Any]:
    return (await expand_sessions(session, [booking]))[0]


async def _load(session: AsyncSession, session_id: str) -> MentoringSession:
    booking = await SessionRepository(session).get_by_id(session_id)
    if booking is None:
        raise NotFoundError("Session not found.")
    return booking


async def book_session(
    session: AsyncSession,
    settings: Settings,
    student: Student,
    *,
    mentor_id: str,
    title: str,
    description: str,
    scheduled_date: datetime,
    duration: int,
    session_type: str,
    topics: Optional[List[str]] = None,
) -> MentoringSession:
    """Create a scheduled session with an approved, active mentor."""
    mentor = await MentorRepository(session).get_by_id(mentor_id)
    if mentor is None or not mentor.is_active or mentor.verification_status != "approved":
        raise NotFoundError("Mentor not available.")

    start = as_utc(scheduled_date)
    window_start, window_end = booking_window(start, duration)
    sessions = SessionRepository(session)
    clash = await sessions.find_student_clash(
        student.id, window_start, window_end, ACTIVE_BOOKING_STATES
    )
    if clash is not None:
        raise BadRequestError("You already have a session scheduled at this time.")

    booking = await sessions.add(
        MentoringSession(
            student_id=student.id,
            mentor_id=mentor.id,
            title=title.strip(),
            description=description.strip(),
            scheduled_date=start,
            duration=duration,
            session_type=session_type,
            status=SessionStatus.SCHEDULED.value,
            topics=list(topics or []),
        )
    )
    if session_type == SessionType.VIDEO_CALL.value:
        booking.meeting_id = meeting_identifier(booking.id)
        booking.meeting_link = meeting_link(settings.meeting_base_url, booking.id)
        await sessions.save(booking)

    log_session_booked(booking.id, student.id, mentor.id, duration)
    return booking


async def list_student_sessions(
    session: AsyncSession, student: Student, status: Optional[str], page: int, limit: int
) -> Dict[str, Any]:
    rows, total = await SessionRepository(session).page_for_student(student.id, status, page, limit)
    return page_payload("sessions", await expand_sessions(session, rows), total, page, limit)


async def list_mentor_sessions(
    session: AsyncSession, mentor: Mentor, status: Optional[str], page: int, limit: int
) -> Dict[str, Any]:
    rows, total = await SessionRepository(session).page_for_mentor(mentor.id, status, page, limit)
    return page_payload("sessions", await expand_sessions(session, rows), total, page, limit)


async def list_all_sessions(
    session: AsyncSession, status: Optional[str], page: int, limit: int
) -> Dict[str, Any]:
    rows, total = await SessionRepository(session).page_all(status, page, limit)
    return page_payload("sessions", await expand_sessions(session, rows), total, page, limit)


async def _fold_completion(
    session: AsyncSession, booking: MentoringSession, mentor: Mentor
) -> None:
    """Add a freshly completed session to the mentor totals and student progress."""
    minutes = credited_minutes(booking.actual_duration, booking.duration)
    first_with_student = not await SessionRepository(session).has_other_completed(
        mentor.id, booking.student_id, booking.id
    )
    mentor.total_sessions = (mentor.total_sessions or 0) + 1
    mentor.total_hours = (mentor.total_hours or 0.0) + minutes / 60
    if first_with_student:
        mentor.students_mentored = (mentor.students_mentored or 0) + 1
    await MentorRepository(session).save(mentor)

    student = await StudentRepository(session).get_by_id(booking.student_id)
    if student is not None:
        progress = dict(student.progress or {})
        progress["total_sessions"] = int(progress.get("total_sessions", 0)) + 1
        progress["total_hours"] = float(progress.get("total_hours", 0.0)) + minutes / 60
        student.progress = progress
        await StudentRepository(session).save(student)


async def apply_transition(
    session: AsyncSession,
    booking: MentoringSession,
    target: str,
    *,
    actor: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> MentoringSession:
    """Move ``booking`` to ``target`` and stamp the fields that go with it.

    Raises BadRequestError for any move the life cycle does not allow.
    """
    now = now or utcnow()
    current = booking.status
    if not can_transition(current, target):
        raise BadRequestError(f"Cannot change session status from '{current}' to '{target}'.")

    booking.status = target
    if notes:
        booking.notes = {**(booking.notes or {}), actor: notes}

    if target == SessionStatus.IN_PROGRESS.value and booking.actual_start_time is None:
        booking.actual_start_time = now
    elif target == SessionStatus.CANCELLED.value:
        booking.cancellation = cancellation_record(actor, None, now)
    elif target == SessionStatus.COMPLETED.value:
        stamp = completion_stamp(
            booking.scheduled_date, booking.actual_start_time, booking.actual_end_time, now
        )
        booking.actual_start_time = stamp.actual_start_time
        booking.actual_end_time = stamp.actual_end_time
        booking.actual_duration = stamp.actual_duration

    await SessionRepository(session).save(booking)

    if target == SessionStatus.COMPLETED.value:
        mentor = await MentorRepository(session).get_by_id(booking.mentor_id)
        if mentor is not None:
            await _fold_completion(session, booking, mentor)

    log_session_status_changed(booking.id, current, target, actor)
    return booking


async def mentor_update_status(
    session: AsyncSession,
    mentor: Mentor,
    session_id: str,
    status: str,
    notes: Optional[str] = None,
) -> MentoringSession:
    booking = await _load(session, session_id)
    if booking.mentor_id != mentor.id:
        raise PermissionDeniedError("Not authorized to update this session.")
    return await apply_transition(session, booking, status, actor=Role.MENTOR.value, notes=notes)


async def admin_update_session(
    session: AsyncSession,
    session_id: str,
    status: Optional[str] = None,
    notes: Optional[str] = None,
) -> MentoringSession:
    booking = await _load(session, session_id)
    if status and status != booking.status:
        await apply_transition(session, booking, status, actor=Role.ADMIN.value)
    elif status:
        raise BadRequestError(f"Session is already '{status}'.")
    if notes:
        booking.notes = {**(booking.notes or {}), "admin": notes}
        await SessionRepository(session).save(booking)
    return booking


async def cancel_by_student(
    session: AsyncSession,
    student: Student,
    session_id: str,
    reason: Optional[str] = None,
) -> MentoringSession:
    booking = await _load(session, session_id)
    if booking.student_id != student.id:
        raise PermissionDeniedError("Not authorized to cancel this session.")
    if booking.status == SessionStatus.CANCELLED.value:
        raise BadRequestError("Session is already cancelled.")
    if is_terminal(booking.status):
        raise BadRequestError(f"Cannot cancel a session that is '{booking.status}'.")

    previous = booking.status
    now = utcnow()
    booking.status = SessionStatus.CANCELLED.value
    booking.cancellation = cancellation_record(Role.STUDENT.value, reason, now)
    await SessionRepository(session).save(booking)
    log_session_status_changed(booking.id, previous, booking.status, Role.STUDENT.value)
    return booking


async def _record_mentor_review(
    session: AsyncSession, booking: MentoringSession, rating: int, comment: Optional[str]
) -> None:
    mentor = await MentorRepository(session).get_by_id(booking.mentor_id)
    if mentor is None:
        logger.warning("Session %s references missing mentor %s", booking.id, booking.mentor_id)
        return
    reviews = list(mentor.reviews or [])
    reviews.append({
        "student_id": booking.student_id,
        "rating": rating,
        "comment": comment,
        "date": utcnow().isoformat(),
    })
    mentor.reviews = reviews
    mentor.rating_average = average_rating(reviews)
    mentor.rating_total_reviews = len(reviews)
    await MentorRepository(session).save(mentor)
    log_mentor_rating_updated(mentor.id, mentor.rating_average, mentor.rating_total_reviews)


async def submit_feedback(
    session: AsyncSession,
    booking_id: str,
    side: FeedbackSide,
    profile_id: str,
    rating: int,
    comment: Optional[str] = None,
) -> MentoringSession:
    """Record one side's feedback on a completed session, at most once per side.

    ``profile_id`` is the caller's Student id for the student side and Mentor
    id for the mentor side. Student feedback also becomes a mentor review.
    """
    booking = await _load(session, booking_id)
    owner = booking.student_id if side is FeedbackSide.STUDENT else booking.mentor_id
    if owner != profile_id:
        raise PermissionDeniedError("Not authorized to submit feedback for this session.")
    if booking.status != SessionStatus.COMPLETED.value:
        raise BadRequestError("Can only submit feedback for completed sessions.")
    if has_feedback(booking.feedback, side):
        raise BadRequestError("Feedback already submitted for this session.")

    feedback = dict(booking.feedback or {})
    feedback[side.value] = feedback_entry(rating, comment, utcnow())
    booking.feedback = feedback
    await SessionRepository(session).save(booking)
    log_feedback_submitted(booking.id, side.value, rating)

    if side is FeedbackSide.STUDENT:
        await _record_mentor_review(session, booking, rating, comment)
    return booking


async def submit_feedback_as(
    session: AsyncSession,
    user: User,
    booking_id: str,
    rating: int,
    comment: Optional[str] = None,
) -> MentoringSession:
    """Feedback on behalf of whichever side the caller's role puts them on."""
    if user.role == Role.STUDENT.value:
        student = await StudentRepository(session).get_by_user_id(user.id)
        if student is None:
            raise NotFoundError("Student profile not found.")
        return await submit_feedback(
            session, booking_id, FeedbackSide.STUDENT, student.id, rating, comment
        )
    if user.role == Role.MENTOR.value:
        mentor = await MentorRepository(session).get_by_user_id(user.id)
        if mentor is None:
            raise NotFoundError("Mentor profile not found.")
        return await submit_feedback(
            session, booking_id, FeedbackSide.MENTOR, mentor.id, rating, comment
        )
    raise PermissionDeniedError("Not authorized to submit feedback for this session.")


async def participant_side(
    session: AsyncSession, booking: MentoringSession, user: User
) -> Optional[str]:
    """'student' / 'mentor' if the user takes part in the session, else None."""
    student = await StudentRepository(session).get_by_id(booking.student_id)
    if student is not None and student.user_id == user.id:
        return FeedbackSide.STUDENT.value
    mentor = await MentorRepository(session).get_by_id(booking.mentor_id)
    if mentor is not None and mentor.user_id == user.id:
        return FeedbackSide.MENTOR.value
    return None


async def get_session_for(session: AsyncSession, user: User, session_id: str) -> MentoringSession:
    booking = await _load(session, session_id)
    if user.role == Role.ADMIN.value:
        return booking
    if await participant_side(session, booking, user) is None:
        raise PermissionDeniedError("Not authorized to view this session.")
    return booking


async def get_chat(session: AsyncSession, user: User, session_id: str) -> List[Dict[str, Any]]:
    booking = await _load(session, session_id)
    if await participant_side(session, booking, user) is None:
        raise PermissionDeniedError("Not authorized to view chat for this session.")
    return list(booking.chat_history or [])


async def post_chat(
    session: AsyncSession, user: User, session_id: str, message: Optional[str]
) -> Dict[str, Any]:
    if not message or not message.strip():
        raise BadRequestError("Message is required.")
    booking = await _load(session, session_id)
    sender = await participant_side(session, booking, user)
    if sender is None:
        raise PermissionDeniedError("Not authorized to post chat for this session.")
    entry = {"sender": sender, "message": message, "timestamp": utcnow().isoformat()}
    booking.chat_history = [*(booking.chat_history or []), entry]
    await SessionRepository(session).save(booking)
    return entry


async def mentor_upcoming(session: AsyncSession, mentor: Mentor) -> List[Dict[str, Any]]:
    rows = await SessionRepository(session).upcoming_for_mentor(
        mentor.id, utcnow(), ACTIVE_BOOKING_STATES
    )
    return await expand_sessions(session, rows)


async def mentor_recent(session: AsyncSession, mentor: Mentor) -> List[Dict[str, Any]]:
    rows = await SessionRepository(session).recent_completed_for_mentor(mentor.id)
    return await expand_sessions(session, rows)
