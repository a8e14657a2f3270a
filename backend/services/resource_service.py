"""Resources (scholarships, guides, articles): listing, moderation and reviews."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import BadRequestError, NotFoundError
from domain.mentoring.ratings import average_rating
from models.base import utcnow
from models.resource import Resource
from models.user import User
from repositories.resource_repo import ResourceRepository
from services.serializers import page_payload, resource_dict

_MUTABLE_FIELDS = (
    "title", "description", "type", "category", "content", "eligibility",
    "financial_info", "deadlines", "application_process", "tags", "language",
    "author", "status", "featured", "priority",
)


async def _load(session: AsyncSession, resource_id: str) -> Resource:
    resource = await ResourceRepository(session).get_by_id(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found.")
    return resource


async def list_resources(
    session: AsyncSession,
    *,
    type: Optional[str] = None,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    status: Optional[str] = "active",
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    rows, total = await ResourceRepository(session).search(
        type=type, category=category, featured=featured, status=status, page=page, limit=limit
    )
    now = utcnow()
    return page_payload("resources", [resource_dict(r, now) for r in rows], total, page, limit)


async def featured(session: AsyncSession) -> list:
    now = utcnow()
    return [resource_dict(r, now) for r in await ResourceRepository(session).list_featured()]


async def view(session: AsyncSession, resource_id: str) -> Dict[str, Any]:
    """Resource detail; every read counts as a view."""
    resource = await _load(session, resource_id)
    resource.views = (resource.views or 0) + 1
    await ResourceRepository(session).save(resource)
    return resource_dict(resource)


async def create(session: AsyncSession, admin: User, data: Dict[str, Any]) -> Dict[str, Any]:
    now = utcnow()
    values = {k: v for k, v in data.items() if k in _MUTABLE_FIELDS and v is not None}
    resource = await ResourceRepository(session).add(
        Resource(**values, created_by=admin.id, approved_by=admin.id, approved_at=now)
    )
    return {"message": "Resource created successfully", "resource": resource_dict(resource, now)}


async def update(session: AsyncSession, resource_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    resource = await _load(session, resource_id)
    for key, value in data.items():
        if key in _MUTABLE_FIELDS and value is not None:
            setattr(resource, key, value)
    await ResourceRepository(session).save(resource)
    return {"message": "Resource updated successfully", "resource": resource_dict(resource)}


async def delete(session: AsyncSession, resource_id: str) -> Dict[str, Any]:
    resource = await _load(session, resource_id)
    await ResourceRepository(session).delete(resource)
    return {"message": "Resource deleted successfully"}


async def review(
    session: AsyncSession, user: User, resource_id: str, rating: int, comment: Optional[str]
) -> Dict[str, Any]:
    """One review per user; the average is recomputed from every review."""
    resource = await _load(session, resource_id)
    reviews = list(resource.reviews or [])
    if any(r.get("user_id") == user.id for r in reviews):
        raise BadRequestError("You have already reviewed this resource.")
    reviews.append({
        "user_id": user.id,
        "rating": rating,
        "comment": comment,
        "date": utcnow().isoformat(),
    })
    resource.reviews = reviews
    resource.rating_average = average_rating(reviews)
    resource.rating_total = len(reviews)
    await ResourceRepository(session).save(resource)
    return {"message": "Review submitted successfully", "resource": resource_dict(resource)}
