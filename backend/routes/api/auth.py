"""Identity endpoints under /api/auth."""

from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.dependencies import get_current_user, get_db_session
from models.user import User
from services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterBody(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Literal["student", "mentor", "admin"]
    phone: Optional[str] = Field(default=None, max_length=32)

    # student extras
    school_name: Optional[str] = None
    current_class: Optional[str] = None
    interests: Optional[List[str]] = None
    career_goals: Optional[str] = None

    # mentor extras
    designation: Optional[str] = None
    organization: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)
    bio: Optional[str] = None


class LoginBody(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileBody(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=32)


class ChangePasswordBody(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class ForgotPasswordBody(BaseModel):
    email: EmailStr


class ResetPasswordBody(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


_EXTRA_FIELDS = (
    "school_name", "current_class", "interests", "career_goals",
    "designation", "organization", "experience", "bio",
)


@router.post("/register", status_code=201, summary="Register a student, mentor or admin")
async def register(
    body: RegisterBody,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    extra = {k: getattr(body, k) for k in _EXTRA_FIELDS if getattr(body, k) is not None}
    return await auth_service.register(
        session,
        settings,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        phone=body.phone,
        extra=extra,
    )


@router.post("/login", summary="Exchange credentials for a bearer token")
async def login(
    body: LoginBody,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    return await auth_service.login(session, settings, body.email, body.password)


@router.get("/profile")
async def get_profile(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await auth_service.get_profile(session, user)


@router.put("/profile")
async def update_profile(
    body: ProfileBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await auth_service.update_profile(
        session, user, first_name=body.first_name, last_name=body.last_name, phone=body.phone
    )


@router.put("/change-password")
async def change_password(
    body: ChangePasswordBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await auth_service.change_password(
        session, user, body.current_password, body.new_password
    )


@router.post("/logout")
async def logout(user: User = Depends(get_current_user)):
    """Tokens are stateless; the client drops its copy."""
    return {"message": "Logged out successfully"}


@router.post("/forgot-password")
async def forgot_password(
    body: ForgotPasswordBody,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    return await auth_service.forgot_password(session, settings, body.email)


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordBody,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    return await auth_service.reset_password(session, settings, body.token, body.new_password)
