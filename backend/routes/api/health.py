"""Liveness and, in development, a view of the caller's rate-limit counters."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from core.config import Settings, get_settings
from core.errors import NotFoundError
from limits.limits import client_address, describe_limits, get_limiter

router = APIRouter(tags=["health"])


@router.get("/health", summary="Service health")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "status": "OK",
        "message": "Career Mentorship Portal API is running",
        "environment": settings.env,
        "rate_limit": describe_limits(settings),
    }


@router.get("/dev/rate-limit-status", summary="Rate-limit counters for the caller")
async def rate_limit_status(request: Request, settings: Settings = Depends(get_settings)) -> dict:
    if not settings.is_development:
        raise NotFoundError("Route not found")
    client = client_address(request)
    return {
        "client": client,
        "enabled": settings.rate_limit_enabled,
        "window_minutes": settings.rate_limit_window_minutes,
        "limits": {"general": settings.rate_limit_general, "auth": settings.rate_limit_auth},
        "counts": get_limiter(settings).snapshot(client),
    }
