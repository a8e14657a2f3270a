"""Mentor directory and mentor self-service (profile, availability, statistics)."""

from __future__ import annotations

from collections import Counter, OrderedDict
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from domain.mentoring.lifecycle import credited_minutes
from domain.mentoring.ratings import mean_rating, round_half_up
from domain.mentoring.types import SessionStatus
from models.mentor import Mentor
from models.user import User
from repositories.mentor_repo import MentorRepository
from repositories.session_repo import SessionRepository
from repositories.user_repo import UserRepository
from services.serializers import mentor_dict, page_payload

_PROFILE_FIELDS = ("designation", "organization", "experience", "bio", "expertise", "languages", "achievements")


def _matches(mentor: Mentor, field: Optional[str], language: Optional[str]) -> bool:
    if field and not any((e or {}).get("field") == field for e in mentor.expertise or []):
        return False
    if language and language not in (mentor.languages or []):
        return False
    return True


async def directory(
    session: AsyncSession,
    *,
    field: Optional[str] = None,
    rating: Optional[float] = None,
    experience: Optional[int] = None,
    language: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    """Approved, active mentors, best rated first, one page at a time."""
    candidates = await MentorRepository(session).list_directory(
        min_rating=rating, min_experience=experience
    )
    matched = [m for m in candidates if _matches(m, field, language)]
    start = (max(page, 1) - 1) * limit
    page_rows = matched[start:start + limit]
    users = {u.id: u for u in await UserRepository(session).get_many([m.user_id for m in page_rows])}
    items = [mentor_dict(m, users.get(m.user_id)) for m in page_rows]
    return page_payload("mentors", items, len(matched), page, limit)


async def mentor_detail(session: AsyncSession, mentor_id: str) -> Dict[str, Any]:
    mentor = await MentorRepository(session).get_by_id(mentor_id)
    if mentor is None:
        raise NotFoundError("Mentor not found.")
    if mentor.verification_status != "approved":
        raise NotFoundError("Mentor not available.")
    user = await UserRepository(session).get_by_id(mentor.user_id)
    return mentor_dict(mentor, user)


async def update_profile(
    session: AsyncSession, mentor: Mentor, user: User, updates: Dict[str, Any]
) -> Dict[str, Any]:
    for key in _PROFILE_FIELDS:
        value = updates.get(key)
        if value is not None and value != "":
            setattr(mentor, key, value)
    await MentorRepository(session).save(mentor)
    return {"message": "Profile updated successfully", "mentor": mentor_dict(mentor, user)}


async def update_availability(
    session: AsyncSession,
    mentor: Mentor,
    schedule: Optional[List[Dict[str, Any]]],
    timezone: Optional[str],
) -> Dict[str, Any]:
    if schedule is not None:
        mentor.availability_schedule = schedule
    mentor.availability_timezone = timezone or "Asia/Kolkata"
    await MentorRepository(session).save(mentor)
    return {
        "message": "Availability updated successfully",
        "availability": {
            "schedule": mentor.availability_schedule,
            "timezone": mentor.availability_timezone,
        },
    }


def _student_rating(booking) -> Optional[int]:
    entry = (booking.feedback or {}).get("student") or {}
    return entry.get("rating")


async def statistics(session: AsyncSession, mentor: Mentor) -> Dict[str, Any]:
    """Totals over every session of the mentor, plus the last six months and rating spread."""
    bookings = await SessionRepository(session).all_for_mentor(mentor.id)
    completed = [b for b in bookings if b.status == SessionStatus.COMPLETED.value]
    ratings = [r for r in (_student_rating(b) for b in bookings) if r]
    completed_minutes = sum(credited_minutes(b.actual_duration, b.duration) for b in completed)

    monthly: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for booking in sorted(bookings, key=lambda b: b.scheduled_date, reverse=True):
        key = booking.scheduled_date.strftime("%Y-%m")
        bucket = monthly.setdefault(
            key, {"month": key, "sessions": 0, "completed_sessions": 0, "hours": 0.0, "_ratings": []}
        )
        bucket["sessions"] += 1
        if booking.status == SessionStatus.COMPLETED.value:
            bucket["completed_sessions"] += 1
            bucket["hours"] += credited_minutes(booking.actual_duration, booking.duration) / 60
        if _student_rating(booking):
            bucket["_ratings"].append(_student_rating(booking))

    months: List[Dict[str, Any]] = []
    for bucket in list(monthly.values())[:6]:
        collected = bucket.pop("_ratings")
        bucket["hours"] = round_half_up(bucket["hours"], 2)
        bucket["average_rating"] = mean_rating(collected)
        months.append(bucket)

    distribution = Counter(ratings)
    return {
        "total_sessions": len(bookings),
        "completed_sessions": len(completed),
        "upcoming_sessions": sum(
            1 for b in bookings
            if b.status in (SessionStatus.SCHEDULED.value, SessionStatus.CONFIRMED.value)
        ),
        "cancelled_sessions": sum(1 for b in bookings if b.status == SessionStatus.CANCELLED.value),
        "total_hours": round_half_up(completed_minutes / 60, 2),
        "average_rating": mean_rating(ratings),
        "total_students": len({b.student_id for b in bookings}),
        "monthly": months,
        "rating_distribution": {str(k): distribution[k] for k in sorted(distribution)},
    }
