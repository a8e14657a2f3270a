"""Shared files under /api/files: mentor uploads, visibility-filtered reads."""

from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.dependencies import get_current_mentor, get_current_user, get_db_session
from models.mentor import Mentor
from models.user import User
from repositories.user_repo import UserRepository
from services import file_service

router = APIRouter(prefix="/files", tags=["files"])


class FileUpdateBody(BaseModel):
    title: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = None
    tags: Union[str, List[str], None] = None
    is_public: Optional[bool] = None


async def _mentor_user(
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    return await UserRepository(session).get_by_id(mentor.user_id)


@router.post("/upload", status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    tags: Optional[str] = Form(default=None),
    is_public: bool = Form(default=False),
    user: User = Depends(_mentor_user),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    return await file_service.upload(
        session,
        settings,
        user,
        original_name=file.filename or "",
        content_type=file.content_type,
        stream=file,
        title=title,
        description=description,
        category=category,
        tags=tags,
        is_public=is_public,
    )


@router.get("")
async def list_files(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await file_service.list_files(
        session, user, category=category, search=search, page=page, limit=limit
    )


@router.get("/categories")
async def file_categories(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await file_service.categories(session)


@router.get("/download/{file_id}")
async def download_file(
    file_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    shared = await file_service.prepare_download(session, user, file_id)
    return FileResponse(shared.file_path, media_type=shared.mime_type, filename=shared.original_name)


@router.get("/{file_id}")
async def file_info(
    file_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await file_service.info(session, user, file_id)


@router.put("/{file_id}")
async def update_file(
    file_id: str,
    body: FileUpdateBody,
    user: User = Depends(_mentor_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await file_service.update(session, user, file_id, body.model_dump(exclude_none=True))


@router.delete("/{file_id}")
async def delete_file(
    file_id: str,
    user: User = Depends(_mentor_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await file_service.delete(session, user, file_id)
