from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_, select

from models.shared_file import SharedFile
from .base import BaseRepository


class FileRepository(BaseRepository[SharedFile]):
    """Repository for uploaded file metadata."""

    model = SharedFile

    async def list_visible(
        self,
        *,
        role: str,
        user_id: str,
        category: Optional[str] = None,
    ) -> List[SharedFile]:
        """Files the caller may see, newest upload first.

        Students see public files, mentors their own or public ones, admins all.
        """
        stmt = select(SharedFile)
        if role == "student":
            stmt = stmt.where(SharedFile.is_public.is_(True))
        elif role == "mentor":
            stmt = stmt.where(or_(SharedFile.uploaded_by == user_id, SharedFile.is_public.is_(True)))
        if category:
            stmt = stmt.where(SharedFile.category == category)
        stmt = stmt.order_by(SharedFile.upload_date.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def distinct_categories(self) -> List[str]:
        stmt = select(SharedFile.category).distinct().order_by(SharedFile.category)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
