"""Resources under /api/resources: public reads, admin writes, authenticated reviews."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_current_user, get_db_session, require_admin
from models.user import User
from services import resource_service

router = APIRouter(prefix="/resources", tags=["resources"])

ResourceTypeValue = Literal["scholarship", "career_guide", "exam_guide", "article", "video", "document"]
ResourceStatusValue = Literal["active", "inactive", "expired"]
ResourceCategoryValue = Literal[
    "Engineering", "Medical", "Arts", "Commerce", "Law", "Agriculture",
    "Computer Science", "Design", "Teaching", "Business", "Sports",
    "Music", "Dance", "Literature", "Science", "Technology", "General",
]


class DeadlinesBody(BaseModel):
    application: Optional[datetime] = None
    document_submission: Optional[datetime] = None
    result: Optional[datetime] = None


class ResourceCreateBody(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1, max_length=2000)
    type: ResourceTypeValue
    category: ResourceCategoryValue
    content: Optional[Dict[str, Any]] = None
    eligibility: Optional[Dict[str, Any]] = None
    financial_info: Optional[Dict[str, Any]] = None
    deadlines: Optional[DeadlinesBody] = None
    application_process: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    language: Optional[str] = None
    author: Optional[Dict[str, Any]] = None
    featured: Optional[bool] = None
    priority: Optional[int] = None


class ResourceUpdateBody(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    type: Optional[ResourceTypeValue] = None
    category: Optional[ResourceCategoryValue] = None
    content: Optional[Dict[str, Any]] = None
    eligibility: Optional[Dict[str, Any]] = None
    financial_info: Optional[Dict[str, Any]] = None
    deadlines: Optional[DeadlinesBody] = None
    application_process: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    status: Optional[ResourceStatusValue] = None
    featured: Optional[bool] = None
    priority: Optional[int] = None


class ReviewBody(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)


@router.get("")
async def list_resources(
    type: Optional[ResourceTypeValue] = None,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    status: ResourceStatusValue = "active",
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
):
    return await resource_service.list_resources(
        session, type=type, category=category, featured=featured, status=status, page=page, limit=limit
    )


@router.get("/featured/list")
async def featured(session: AsyncSession = Depends(get_db_session)):
    return await resource_service.featured(session)


@router.get("/category/{category}")
async def by_category(
    category: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
):
    return await resource_service.list_resources(session, category=category, page=page, limit=limit)


@router.get("/{resource_id}")
async def resource_detail(resource_id: str, session: AsyncSession = Depends(get_db_session)):
    return await resource_service.view(session, resource_id)


@router.post("", status_code=201)
async def create_resource(
    body: ResourceCreateBody,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await resource_service.create(session, admin, body.model_dump(mode="json", exclude_none=True))


@router.put("/{resource_id}")
async def update_resource(
    resource_id: str,
    body: ResourceUpdateBody,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await resource_service.update(
        session, resource_id, body.model_dump(mode="json", exclude_none=True)
    )


@router.delete("/{resource_id}")
async def delete_resource(
    resource_id: str,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await resource_service.delete(session, resource_id)


@router.post("/{resource_id}/review")
async def review_resource(
    resource_id: str,
    body: ReviewBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await resource_service.review(session, user, resource_id, body.rating, body.comment)
