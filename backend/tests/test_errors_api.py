"""Error envelopes: typed service errors, validation, unknown routes and crashes."""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from core.config import Settings
from core.errors import NotFoundError, PermissionDeniedError, register_exception_handlers


def _app(settings: Settings) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app, settings)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Thing not found.", details={"id": "42"})

    @app.get("/forbidden")
    async def forbidden():
        raise PermissionDeniedError("Nope.")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database exploded")

    @app.get("/items/{item_id}")
    async def item(item_id: int):
        return {"id": item_id}

    return app


async def _get(settings: Settings, path: str):
    transport = ASGITransport(app=_app(settings), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


@pytest.mark.asyncio
async def test_typed_errors_map_to_status() -> None:
    r = await _get(Settings(), "/missing")
    assert r.status_code == 404
    assert r.json() == {"message": "Thing not found.", "details": {"id": "42"}}
    r = await _get(Settings(), "/forbidden")
    assert r.status_code == 403
    assert r.json() == {"message": "Nope."}


@pytest.mark.asyncio
async def test_validation_error_shape() -> None:
    r = await _get(Settings(), "/items/abc")
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Validation failed"
    assert body["errors"][0]["field"] == "path.item_id"


@pytest.mark.asyncio
async def test_unknown_route() -> None:
    r = await _get(Settings(), "/nowhere")
    assert r.status_code == 404
    assert r.json() == {"message": "Route not found"}


@pytest.mark.asyncio
async def test_unhandled_error_detail_only_in_development() -> None:
    dev = await _get(Settings(env="development"), "/boom")
    assert dev.status_code == 500
    assert dev.json() == {"message": "Something went wrong!", "error": "database exploded"}

    prod = await _get(Settings(env="production"), "/boom")
    assert prod.status_code == 500
    assert prod.json() == {"message": "Something went wrong!"}
