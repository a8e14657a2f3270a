"""Operator commands: bulk mentor approval and argument parsing."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

from backend_entry import DEFAULT_PORT, _parse_args
from core.database import get_database_manager
from ops.ops_events import OPS_LOGGER_NAME
from services import admin_service


def test_parse_args_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    args = _parse_args([])
    assert args.ops is None
    assert args.port == DEFAULT_PORT
    assert _parse_args(["--ops", "approve-all-mentors"]).ops == "approve-all-mentors"
    with pytest.raises(SystemExit):
        _parse_args(["--ops", "drop-everything"])


@pytest.mark.asyncio
async def test_approve_all_mentors(client, portal, caplog: pytest.LogCaptureFixture) -> None:
    """Pending and rejected mentors are approved and their logins activated."""
    caplog.set_level(logging.INFO, logger=OPS_LOGGER_NAME)
    admin = await portal.admin()
    pending = await portal.mentor(approve=False)
    rejected = await portal.mentor(approve=False)
    await client.post(
        "/api/admin/mentors/reject",
        json={"mentor_id": rejected["mentor_id"], "reason": "Missing documents"},
        headers=admin["headers"],
    )
    await portal.mentor(admin=admin)

    async with get_database_manager().session() as session:
        assert await admin_service.approve_all_mentors(session) == 2
    async with get_database_manager().session() as session:
        assert await admin_service.approve_all_mentors(session) == 0

    directory = (await client.get("/api/mentors")).json()
    assert directory["total"] == 3
    ids = {m["id"] for m in directory["mentors"]}
    assert {pending["mentor_id"], rejected["mentor_id"]} <= ids
    assert "admin_id='system'" in caplog.text
