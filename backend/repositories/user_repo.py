from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import or_, select

from models.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User identities."""

    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """Emails are stored lower-cased; lookups normalise the same way."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, ids: Sequence[str]) -> List[User]:
        if not ids:
            return []
        stmt = select(User).where(User.id.in_(list(set(ids))))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(
        self,
        *,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[Sequence[User], int]:
        """Admin listing: role / status filters and a name or email substring."""
        stmt = select(User)
        if role:
            stmt = stmt.where(User.role == role)
        if status:
            stmt = stmt.where(User.status == status)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )
        stmt = stmt.order_by(User.created_at.desc())
        return await self.paginate(stmt, page, limit)

    async def list_active_by_role(self, role: str, exclude_id: Optional[str] = None) -> List[User]:
        stmt = select(User).where(User.role == role, User.is_active.is_(True))
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
