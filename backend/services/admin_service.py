"""Admin moderation: mentor verification and user status."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import BadRequestError, NotFoundError
from domain.mentoring.types import UserStatus, VerificationStatus
from models.base import utcnow
from models.user import User
from ops.ops_events import log_mentor_verification, log_user_status_changed
from repositories.mentor_repo import MentorRepository
from repositories.user_repo import UserRepository
from services.serializers import mentor_dict, page_payload, user_dict

VERIFICATION_ACTIONS = {
    "approve": VerificationStatus.APPROVED.value,
    "reject": VerificationStatus.REJECTED.value,
}


async def pending_mentors(session: AsyncSession, page: int = 1, limit: int = 20) -> Dict[str, Any]:
    rows, total = await MentorRepository(session).list_by_verification(
        VerificationStatus.PENDING.value, page, limit
    )
    users = {u.id: u for u in await UserRepository(session).get_many([m.user_id for m in rows])}
    items = [mentor_dict(m, users.get(m.user_id)) for m in rows]
    return page_payload("mentors", items, total, page, limit)


async def list_users(
    session: AsyncSession,
    *,
    role: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    rows, total = await UserRepository(session).search(
        role=role, status=status, search=search, page=page, limit=limit
    )
    return page_payload("users", [user_dict(u) for u in rows], total, page, limit)


async def _activate(users: UserRepository, user: User) -> None:
    user.status = UserStatus.ACTIVE.value
    user.is_active = True
    user.is_verified = True
    await users.save(user)


async def verify_mentor(
    session: AsyncSession,
    admin: User,
    action: str,
    mentor_id: str,
    reason: Optional[str] = None,
) -> Dict[str, Any]:
    """Approve or reject a mentor. Approval also re-activates the mentor's login."""
    decision = VERIFICATION_ACTIONS.get(action)
    if decision is None:
        raise BadRequestError("Invalid action")
    mentors = MentorRepository(session)
    mentor = await mentors.get_by_id(mentor_id)
    if mentor is None:
        raise NotFoundError("Mentor not found")

    now = utcnow()
    mentor.verification_status = decision
    mentor.verified_by = admin.id
    mentor.verified_at = now
    mentor.rejection_reason = reason if decision == VerificationStatus.REJECTED.value else None
    await mentors.save(mentor)

    user = await UserRepository(session).get_by_id(mentor.user_id)
    if user is not None and decision == VerificationStatus.APPROVED.value:
        await _activate(UserRepository(session), user)

    log_mentor_verification(mentor.id, decision, admin.id, reason)
    return {"message": f"Mentor {decision} successfully", "mentor": mentor_dict(mentor, user)}


async def set_user_status(
    session: AsyncSession, admin: User, user_id: str, status: str
) -> Dict[str, Any]:
    """Anything other than 'active' also blocks login and token use."""
    users = UserRepository(session)
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    user.status = status
    user.is_active = status == UserStatus.ACTIVE.value
    await users.save(user)
    log_user_status_changed(user.id, status, admin.id)
    return {"message": "User status updated successfully", "user": user_dict(user)}


async def approve_all_mentors(session: AsyncSession, approved_by: Optional[str] = None) -> int:
    """Bulk approval for operators (backend_entry --ops approve-all-mentors).

    Returns the number of mentors whose status changed.
    """
    mentors = MentorRepository(session)
    users = UserRepository(session)
    pending = await mentors.list_not_approved()
    now = utcnow()
    for mentor in pending:
        mentor.verification_status = VerificationStatus.APPROVED.value
        mentor.verified_by = approved_by
        mentor.verified_at = now
        mentor.rejection_reason = None
        user = await users.get_by_id(mentor.user_id)
        if user is not None:
            await _activate(users, user)
        await mentors.save(mentor)
        log_mentor_verification(mentor.id, VerificationStatus.APPROVED.value, approved_by or "system")
    return len(pending)
