# Ensure backend is at sys.path[0] when pytest runs (from repo root or from backend dir)
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

_tests_dir = Path(__file__).resolve().parent
_backend = _tests_dir.parent
_str_backend = str(_backend)
if sys.path[0:1] != [_str_backend]:
    sys.path.insert(0, _str_backend)

# Settings are cached on first use, so the test environment is fixed before any app import.
os.environ.setdefault("ENV", "development")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("MENTOR_AUTO_APPROVE", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="mentorship-uploads-"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.database import dispose_database, get_database_manager, init_database
from limits.limits import reset_rate_limits

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_db():
    """In-memory SQLite with every table created."""
    await init_database(TEST_DATABASE_URL, create_schema=True)
    yield get_database_manager()
    await dispose_database()


@pytest_asyncio.fixture
async def client(test_db):
    from main import app

    reset_rate_limits()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    reset_rate_limits()


class Portal:
    """Drives the HTTP API the way a front end would: register, approve, book."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client
        self._seq = 0

    async def register(self, role: str, password: str = "secret123", **extra: Any) -> Dict[str, Any]:
        self._seq += 1
        body = {
            "email": extra.pop("email", f"{role}{self._seq}@mentor.io"),
            "password": password,
            "first_name": role.title(),
            "last_name": f"User{self._seq}",
            "role": role,
            **extra,
        }
        r = await self.client.post("/api/auth/register", json=body)
        assert r.status_code == 201, r.text
        data = r.json()
        return {
            "email": body["email"],
            "password": password,
            "token": data["token"],
            "user": data["user"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    async def profile_id(self, account: Dict[str, Any]) -> str:
        r = await self.client.get("/api/auth/profile", headers=account["headers"])
        assert r.status_code == 200, r.text
        return r.json()["profile"]["id"]

    async def admin(self) -> Dict[str, Any]:
        return await self.register("admin")

    async def student(self, **extra: Any) -> Dict[str, Any]:
        account = await self.register("student", **extra)
        account["student_id"] = await self.profile_id(account)
        return account

    async def mentor(
        self,
        approve: bool = True,
        admin: Optional[Dict[str, Any]] = None,
        **extra: Any,
    ) -> Dict[str, Any]:
        extra.setdefault("designation", "Software Engineer")
        extra.setdefault("organization", "Acme")
        extra.setdefault("experience", 5)
        account = await self.register("mentor", **extra)
        account["mentor_id"] = await self.profile_id(account)
        if approve:
            admin = admin or await self.admin()
            r = await self.client.post(
                "/api/admin/mentors/approve",
                json={"mentor_id": account["mentor_id"]},
                headers=admin["headers"],
            )
            assert r.status_code == 200, r.text
        return account

    async def book(
        self,
        student: Dict[str, Any],
        mentor: Dict[str, Any],
        *,
        start: Optional[datetime] = None,
        duration: int = 60,
        session_type: str = "video_call",
    ):
        start = start or datetime.now(timezone.utc) + timedelta(days=2)
        return await self.client.post(
            "/api/students/sessions",
            json={
                "mentor_id": mentor["mentor_id"],
                "title": "Career planning",
                "description": "Talk through engineering entrance exams",
                "scheduled_date": start.isoformat(),
                "duration": duration,
                "session_type": session_type,
                "topics": ["JEE", "colleges"],
            },
            headers=student["headers"],
        )

    async def booked_session(self, student: Dict[str, Any], mentor: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        r = await self.book(student, mentor, **kwargs)
        assert r.status_code == 201, r.text
        return r.json()["session"]

    async def set_status(self, mentor: Dict[str, Any], session_id: str, status: str, **extra: Any):
        return await self.client.put(
            f"/api/mentors/sessions/{session_id}/status",
            json={"status": status, **extra},
            headers=mentor["headers"],
        )

    async def completed_session(self, student: Dict[str, Any], mentor: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        booked = await self.booked_session(student, mentor, **kwargs)
        r = await self.set_status(mentor, booked["id"], "completed")
        assert r.status_code == 200, r.text
        return r.json()["session"]


@pytest.fixture
def portal(client) -> Portal:
    return Portal(client)
