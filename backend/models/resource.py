from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UTCDateTime, new_id, utcnow


class Resource(Base):
    """Scholarship, guide or article with eligibility metadata and reviews."""

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)

    content: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    eligibility: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    financial_info: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    deadlines: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    application_process: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    language: Mapped[str] = mapped_column(String(32), nullable=False, default="English")
    author: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downloads: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reviews: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_by: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id"), nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("ix_resource_type_category_status", "type", "category", "status"),
        Index("ix_resource_featured_priority", "featured", "priority"),
    )
