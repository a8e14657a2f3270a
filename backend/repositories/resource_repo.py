from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select

from models.resource import Resource
from .base import BaseRepository


class ResourceRepository(BaseRepository[Resource]):
    """Repository for Resource documents."""

    model = Resource

    @staticmethod
    def _ordered(stmt):
        return stmt.order_by(
            Resource.featured.desc(),
            Resource.priority.desc(),
            Resource.created_at.desc(),
        )

    async def search(
        self,
        *,
        type: Optional[str] = None,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        status: Optional[str] = "active",
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[Resource], int]:
        stmt = select(Resource)
        if status:
            stmt = stmt.where(Resource.status == status)
        if type:
            stmt = stmt.where(Resource.type == type)
        if category:
            stmt = stmt.where(Resource.category == category)
        if featured:
            stmt = stmt.where(Resource.featured.is_(True))
        return await self.paginate(self._ordered(stmt), page, limit)

    async def list_featured(self, limit: int = 6) -> List[Resource]:
        stmt = (
            select(Resource)
            .where(Resource.status == "active", Resource.featured.is_(True))
            .order_by(Resource.priority.desc(), Resource.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
