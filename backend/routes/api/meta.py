"""GET /api/meta/version: application version from the VERSION file."""

from __future__ import annotations

from fastapi import APIRouter

from version import get_version

router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/version", summary="Application version")
def meta_version() -> dict:
    return {"version": get_version()}
