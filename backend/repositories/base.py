from __future__ import annotations

from typing import Any, Generic, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD helpers.

    No commits are performed here - commit responsibility is left to the
    request unit of work (``get_db_session``).
    """

    model: Type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with an async session."""
        self.session = session

    async def add(self, entity: T) -> T:
        """Add an entity and flush so defaults (id, timestamps) are populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def get_by_id(self, id_value: str) -> Optional[T]:
        """Get an entity by its primary key."""
        if not id_value:
            return None
        return await self.session.get(self.model, id_value)

    async def save(self, entity: T) -> T:
        """Flush pending changes on an already tracked entity."""
        await self.session.flush()
        return entity

    async def delete(self, entity: T) -> None:
        """Delete an entity from the session (not committed)."""
        await self.session.delete(entity)
        await self.session.flush()

    async def count(self, stmt: Select[Any]) -> int:
        """Count rows matched by a select statement."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return int((await self.session.execute(count_stmt)).scalar_one())

    async def paginate(
        self, stmt: Select[Any], page: int, limit: int
    ) -> Tuple[Sequence[T], int]:
        """Return one page of ``stmt`` and the unpaged total."""
        total = await self.count(stmt)
        page_stmt = stmt.limit(limit).offset((max(page, 1) - 1) * limit)
        rows = (await self.session.execute(page_stmt)).scalars().all()
        return list(rows), total
