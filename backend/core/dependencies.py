from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from models.mentor import Mentor
from models.student import Student
from models.user import User
from repositories.mentor_repo import MentorRepository
from repositories.student_repo import StudentRepository
from repositories.user_repo import UserRepository

from .config import Settings, get_settings
from .database import get_database_manager
from .errors import AuthenticationError, NotFoundError, PermissionDeniedError
from .security import decode_access_token


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding an AsyncSession from the DatabaseManager."""
    manager = get_database_manager()
    async with manager.session() as session:
        yield session


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError("Access denied. No token provided.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access denied. No token provided.")
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the bearer token to an active User (401 otherwise)."""
    payload = decode_access_token(settings, _bearer_token(authorization))
    user = await UserRepository(session).get_by_id(str(payload["user_id"]))
    if user is None or not user.is_active:
        raise AuthenticationError("Invalid token or user inactive.")
    return user


def require_roles(*roles: str) -> Callable:
    """Dependency factory: the caller's role must be one of ``roles``."""

    async def _checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError("Access denied. Insufficient permissions.")
        return user

    return _checker


async def get_current_student(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> Student:
    student = await StudentRepository(session).get_by_user_id(user.id)
    if student is None:
        raise NotFoundError("Student profile not found.")
    return student


async def get_current_mentor(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> Mentor:
    """Approved mentor profile of the caller (404 without one, 403 until approved)."""
    mentor = await MentorRepository(session).get_by_user_id(user.id)
    if mentor is None:
        raise NotFoundError("Mentor profile not found.")
    if mentor.verification_status != "approved":
        raise PermissionDeniedError("Mentor account not yet approved by admin.")
    return mentor


require_admin = require_roles("admin")
