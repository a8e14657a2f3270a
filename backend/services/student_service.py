"""Student profile, dashboard statistics and the admin student listing."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from domain.mentoring.ratings import mean_rating
from domain.mentoring.types import SessionStatus
from models.student import Student
from models.user import User
from repositories.session_repo import SessionRepository
from repositories.student_repo import StudentRepository
from repositories.user_repo import UserRepository
from services.serializers import student_dict

_OPEN_STATES = (
    SessionStatus.SCHEDULED.value,
    SessionStatus.CONFIRMED.value,
    SessionStatus.IN_PROGRESS.value,
)


async def list_students(session: AsyncSession) -> Dict[str, Any]:
    students = await StudentRepository(session).list_newest_first()
    users = {
        u.id: u for u in await UserRepository(session).get_many([s.user_id for s in students])
    }
    return {
        "students": [student_dict(s, users.get(s.user_id)) for s in students],
        "total": len(students),
    }


async def update_profile(
    session: AsyncSession,
    student: Student,
    user: User,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    """Replace the provided sub-documents; absent keys are left untouched."""
    for key in ("school", "education", "interests", "career_goals", "emergency_contact"):
        value: Optional[Any] = updates.get(key)
        if value:
            setattr(student, key, value)
    await StudentRepository(session).save(student)
    return {"message": "Profile updated successfully", "student": student_dict(student, user)}


async def dashboard_stats(session: AsyncSession, student: Student) -> Dict[str, Any]:
    bookings = await SessionRepository(session).all_for_student(student.id)
    completed = [b for b in bookings if b.status == SessionStatus.COMPLETED.value]
    given = [
        b.feedback["student"]["rating"]
        for b in completed
        if (b.feedback or {}).get("student") and b.feedback["student"].get("rating")
    ]
    return {
        "total_sessions": len(bookings),
        "completed_sessions": len(completed),
        "upcoming_sessions": sum(1 for b in bookings if b.status in _OPEN_STATES),
        "average_rating": mean_rating(given),
    }
