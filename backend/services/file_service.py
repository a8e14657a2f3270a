"""Shared files: mentor uploads stored on local disk, metadata in the store."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import aiofiles
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.errors import BadRequestError, NotFoundError, PermissionDeniedError
from domain.mentoring.types import FILE_CATEGORIES, Role
from models.shared_file import SharedFile
from models.user import User
from repositories.file_repo import FileRepository
from repositories.user_repo import UserRepository
from services.serializers import file_dict

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_BYTES = 256 * 1024

ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
    "image/jpeg",
    "image/png",
    "image/gif",
    "video/mp4",
    "video/avi",
    "video/quicktime",
})


def parse_tags(tags: Union[str, List[str], None]) -> List[str]:
    """Accept a comma separated string or a list; blanks are dropped."""
    if not tags:
        return []
    items = tags.split(",") if isinstance(tags, str) else tags
    return [t.strip() for t in items if t and t.strip()]


def _can_read(shared: SharedFile, user: User) -> bool:
    return shared.is_public or shared.uploaded_by == user.id or user.role == Role.ADMIN.value


def _matches_search(shared: SharedFile, term: str) -> bool:
    needle = term.lower()
    return (
        needle in (shared.title or "").lower()
        or needle in (shared.description or "").lower()
        or any(needle in tag.lower() for tag in shared.tags or [])
    )


async def _load(session: AsyncSession, file_id: str) -> SharedFile:
    shared = await FileRepository(session).get_by_id(file_id)
    if shared is None:
        raise NotFoundError("File not found")
    return shared


async def _with_uploader(session: AsyncSession, shared: SharedFile) -> Dict[str, Any]:
    return file_dict(shared, await UserRepository(session).get_by_id(shared.uploaded_by))


class ByteStream(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


async def _write_stream(stream: ByteStream, path: Path, max_bytes: int) -> int:
    """Copy ``stream`` to ``path`` in chunks; stops as soon as ``max_bytes`` is exceeded."""
    written = 0
    async with aiofiles.open(path, "wb") as fh:
        while True:
            chunk = await stream.read(UPLOAD_CHUNK_BYTES)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                raise BadRequestError(
                    f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB"
                )
            await fh.write(chunk)
    return written


async def upload(
    session: AsyncSession,
    settings: Settings,
    user: User,
    *,
    original_name: str,
    content_type: Optional[str],
    stream: ByteStream,
    title: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    tags: Union[str, List[str], None] = None,
    is_public: bool = False,
) -> Dict[str, Any]:
    """Validate and persist one upload under a generated name in ``upload_dir``.

    The row is flushed before any bytes reach the disk; a failed write or a
    failed flush removes the partial file and the unit of work rolls back.
    """
    if not original_name:
        raise BadRequestError("No file uploaded")
    if content_type not in ALLOWED_MIME_TYPES:
        raise BadRequestError("Invalid file type")
    category = category or "general"
    if category not in FILE_CATEGORIES:
        raise BadRequestError("Invalid file category")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"file-{uuid.uuid4().hex}{Path(original_name).suffix.lower()}"
    file_path = upload_dir / stored_name

    files = FileRepository(session)
    shared = await files.add(
        SharedFile(
            title=title or original_name,
            description=description or "",
            filename=stored_name,
            original_name=original_name,
            file_path=str(file_path),
            file_size=0,
            mime_type=content_type,
            category=category,
            tags=parse_tags(tags),
            uploaded_by=user.id,
            is_public=is_public,
        )
    )
    try:
        shared.file_size = await _write_stream(stream, file_path, settings.max_upload_bytes)
        await files.save(shared)
    except BaseException:
        file_path.unlink(missing_ok=True)
        raise
    logger.info("Stored upload %s (%d bytes) for user %s", stored_name, shared.file_size, user.id)
    return {"message": "File uploaded successfully", "file": file_dict(shared, user)}


async def list_files(
    session: AsyncSession,
    user: User,
    *,
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    """Visible files, newest first. The search narrows the visible set, never widens it."""
    rows = await FileRepository(session).list_visible(role=user.role, user_id=user.id, category=category)
    if search and search.strip():
        rows = [f for f in rows if _matches_search(f, search.strip())]
    total = len(rows)
    start = (max(page, 1) - 1) * limit
    page_rows = rows[start:start + limit]
    uploaders = {
        u.id: u for u in await UserRepository(session).get_many([f.uploaded_by for f in page_rows])
    }
    return {
        "files": [file_dict(f, uploaders.get(f.uploaded_by)) for f in page_rows],
        "pagination": {
            "current": page,
            "total": -(-total // limit) if limit else 0,
            "total_files": total,
            "has_next": page * limit < total,
            "has_prev": page > 1,
        },
    }


async def categories(session: AsyncSession) -> List[str]:
    return await FileRepository(session).distinct_categories()


async def info(session: AsyncSession, user: User, file_id: str) -> Dict[str, Any]:
    shared = await _load(session, file_id)
    if not _can_read(shared, user):
        raise PermissionDeniedError("Access denied")
    return await _with_uploader(session, shared)


async def prepare_download(session: AsyncSession, user: User, file_id: str) -> SharedFile:
    """Check access and that the bytes still exist; counts the download."""
    shared = await _load(session, file_id)
    if not _can_read(shared, user):
        raise PermissionDeniedError("Access denied")
    if not os.path.isfile(shared.file_path):
        raise NotFoundError("File not found on server")
    shared.download_count = (shared.download_count or 0) + 1
    await FileRepository(session).save(shared)
    return shared


async def _owned(session: AsyncSession, user: User, file_id: str) -> SharedFile:
    shared = await _load(session, file_id)
    if shared.uploaded_by != user.id:
        raise PermissionDeniedError("Access denied")
    return shared


async def update(
    session: AsyncSession, user: User, file_id: str, changes: Dict[str, Any]
) -> Dict[str, Any]:
    shared = await _owned(session, user, file_id)
    if changes.get("title"):
        shared.title = changes["title"]
    if changes.get("description"):
        shared.description = changes["description"]
    if changes.get("category"):
        if changes["category"] not in FILE_CATEGORIES:
            raise BadRequestError("Invalid file category")
        shared.category = changes["category"]
    if changes.get("tags") is not None:
        shared.tags = parse_tags(changes["tags"])
    if changes.get("is_public") is not None:
        shared.is_public = bool(changes["is_public"])
    await FileRepository(session).save(shared)
    return {"message": "File updated successfully", "file": file_dict(shared, user)}


async def delete(session: AsyncSession, user: User, file_id: str) -> Dict[str, Any]:
    shared = await _owned(session, user, file_id)
    path = Path(shared.file_path)
    await FileRepository(session).delete(shared)
    # bytes go only after the row delete has been flushed
    path.unlink(missing_ok=True)
    return {"message": "File deleted successfully"}
