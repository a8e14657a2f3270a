"""Identity: registration, login, profile, password change and reset."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.errors import BadRequestError, NotFoundError
from core.security import (
    create_access_token,
    create_reset_token,
    decode_reset_token,
    hash_password,
    verify_password,
)
from domain.mentoring.types import Role, VerificationStatus
from models.base import utcnow
from models.mentor import Mentor
from models.student import Student
from models.user import User
from ops.ops_events import log_user_registered
from repositories.mentor_repo import MentorRepository
from repositories.student_repo import StudentRepository
from repositories.user_repo import UserRepository
from services.serializers import mentor_dict, student_dict, user_dict, user_public

logger = logging.getLogger(__name__)

DEFAULT_SCHOOL = "Government School"
DEFAULT_CLASS = "Class 10"
DEFAULT_MENTOR_BIO = "Professional mentor with expertise in career guidance."


def _new_student(user: User, extra: Dict[str, Any]) -> Student:
    goal = extra.get("career_goals")
    return Student(
        user_id=user.id,
        school={
            "name": extra.get("school_name") or DEFAULT_SCHOOL,
            "type": "government",
            "location": {"city": "", "state": "", "district": ""},
        },
        education={
            "current_class": extra.get("current_class") or DEFAULT_CLASS,
            "board": "CBSE",
            "stream": "Not Selected",
        },
        interests=list(extra.get("interests") or []),
        career_goals=[goal] if goal else [],
        preferences={
            "preferred_languages": ["English", "Hindi"],
            "preferred_mentor_types": ["Industry Professional"],
            "preferred_session_duration": 60,
        },
    )


def _new_mentor(user: User, extra: Dict[str, Any], settings: Settings) -> Mentor:
    approved = settings.mentor_auto_approve
    return Mentor(
        user_id=user.id,
        designation=extra.get("designation") or "Professional",
        organization=extra.get("organization") or "Organization",
        experience=int(extra.get("experience") or 0),
        education={"degree": "", "institution": "", "year": None},
        bio=extra.get("bio") or DEFAULT_MENTOR_BIO,
        languages=["English"],
        availability_timezone="Asia/Kolkata",
        verification_status=(
            VerificationStatus.APPROVED.value if approved else VerificationStatus.PENDING.value
        ),
        verified_at=utcnow() if approved else None,
    )


async def register(
    session: AsyncSession,
    settings: Settings,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: str,
    phone: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Create the User and its role profile; return a token and the public user."""
    users = UserRepository(session)
    if await users.get_by_email(email) is not None:
        raise BadRequestError("User already exists with this email.")

    user = await users.add(
        User(
            email=email.strip().lower(),
            password_hash=hash_password(password),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
            phone=phone,
            # students and admins are verified on creation
            is_verified=role in (Role.STUDENT.value, Role.ADMIN.value),
        )
    )
    extra = extra or {}
    if role == Role.STUDENT.value:
        await StudentRepository(session).add(_new_student(user, extra))
    elif role == Role.MENTOR.value:
        await MentorRepository(session).add(_new_mentor(user, extra, settings))

    log_user_registered(user.id, role)
    token = create_access_token(settings, user.id, user.role)
    return {"message": "User registered successfully", "token": token, "user": user_public(user)}


async def login(session: AsyncSession, settings: Settings, email: str, password: str) -> Dict[str, Any]:
    user = await UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        raise BadRequestError("Invalid credentials.")
    if not user.is_active:
        raise BadRequestError("Account is deactivated.")

    user.last_login = utcnow()
    await UserRepository(session).save(user)
    token = create_access_token(settings, user.id, user.role)
    return {"message": "Login successful", "token": token, "user": user_public(user)}


async def get_profile(session: AsyncSession, user: User) -> Dict[str, Any]:
    profile: Optional[Dict[str, Any]] = None
    if user.role == Role.STUDENT.value:
        student = await StudentRepository(session).get_by_user_id(user.id)
        profile = student_dict(student, user) if student else None
    elif user.role == Role.MENTOR.value:
        mentor = await MentorRepository(session).get_by_user_id(user.id)
        profile = mentor_dict(mentor, user) if mentor else None
    return {"user": user_dict(user), "profile": profile}


async def update_profile(
    session: AsyncSession,
    user: User,
    *,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
) -> Dict[str, Any]:
    if first_name:
        user.first_name = first_name.strip()
    if last_name:
        user.last_name = last_name.strip()
    if phone:
        user.phone = phone
    await UserRepository(session).save(user)
    return {"message": "Profile updated successfully", "user": user_dict(user)}


async def change_password(
    session: AsyncSession, user: User, current_password: str, new_password: str
) -> Dict[str, Any]:
    if not verify_password(current_password, user.password_hash):
        raise BadRequestError("Current password is incorrect.")
    user.password_hash = hash_password(new_password)
    await UserRepository(session).save(user)
    return {"message": "Password changed successfully"}


async def forgot_password(session: AsyncSession, settings: Settings, email: str) -> Dict[str, Any]:
    """Issue a one-hour reset token. Delivery is out of band; development echoes it back."""
    user = await UserRepository(session).get_by_email(email)
    if user is None:
        raise NotFoundError("User not found with this email.")
    token = create_reset_token(settings, user.id)
    logger.info("Password reset token issued for user %s", user.id)
    payload: Dict[str, Any] = {"message": "Password reset instructions sent to your email."}
    if settings.is_development:
        payload["reset_token"] = token
    return payload


async def reset_password(
    session: AsyncSession, settings: Settings, token: str, new_password: str
) -> Dict[str, Any]:
    user_id = decode_reset_token(settings, token)
    users = UserRepository(session)
    user = await users.get_by_id(user_id)
    if user is None:
        raise BadRequestError("Invalid reset token.")
    user.password_hash = hash_password(new_password)
    await users.save(user)
    return {"message": "Password reset successfully"}
