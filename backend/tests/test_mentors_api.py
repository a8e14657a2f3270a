"""Mentor directory and mentor self-service endpoints."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest


@pytest.mark.asyncio
async def test_public_directory_filters(client, portal) -> None:
    """Filters on expertise field, language and experience narrow the approved set."""
    admin = await portal.admin()
    senior = await portal.mentor(admin=admin, experience=15)
    junior = await portal.mentor(admin=admin, experience=2)
    await client.put(
        "/api/mentors/profile",
        json={
            "expertise": [{"field": "Medical", "sub_fields": ["Surgery"], "years_of_experience": 10}],
            "languages": ["English", "Tamil"],
        },
        headers=senior["headers"],
    )

    everyone = (await client.get("/api/mentors")).json()
    assert everyone["total"] == 2

    medical = (await client.get("/api/mentors?field=Medical")).json()
    assert [m["id"] for m in medical["mentors"]] == [senior["mentor_id"]]

    tamil = (await client.get("/api/mentors?language=Tamil")).json()
    assert [m["id"] for m in tamil["mentors"]] == [senior["mentor_id"]]

    experienced = (await client.get("/api/mentors?experience=5")).json()
    assert [m["id"] for m in experienced["mentors"]] == [senior["mentor_id"]]

    paged = (await client.get("/api/mentors?limit=1&page=2")).json()
    assert paged["total"] == 2
    assert paged["total_pages"] == 2
    assert len(paged["mentors"]) == 1
    assert junior["mentor_id"] in {m["id"] for m in everyone["mentors"]}


@pytest.mark.asyncio
async def test_profile_update(client, portal) -> None:
    mentor = await portal.mentor()
    r = await client.put(
        "/api/mentors/profile",
        json={"bio": "Helping students find their way", "organization": "City Hospital"},
        headers=mentor["headers"],
    )
    assert r.status_code == 200
    updated = r.json()["mentor"]
    assert updated["bio"] == "Helping students find their way"
    assert updated["organization"] == "City Hospital"
    assert updated["designation"] == "Software Engineer"


@pytest.mark.asyncio
async def test_availability_update(client, portal) -> None:
    mentor = await portal.mentor()
    schedule = [
        {"day": "Monday", "slots": [{"start_time": "09:00", "end_time": "11:00"}]},
        {"day": "Friday", "slots": [{"start_time": "16:00", "end_time": "18:00", "is_available": False}]},
    ]
    r = await client.put(
        "/api/mentors/availability",
        json={"schedule": schedule, "timezone": "Europe/Berlin"},
        headers=mentor["headers"],
    )
    assert r.status_code == 200
    availability = r.json()["availability"]
    assert availability["timezone"] == "Europe/Berlin"
    assert availability["schedule"][0]["slots"][0]["is_available"] is True
    assert availability["schedule"][1]["slots"][0]["is_available"] is False

    bad = await client.put(
        "/api/mentors/availability",
        json={"schedule": [{"day": "Someday", "slots": []}]},
        headers=mentor["headers"],
    )
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_mentor_stats(client, portal) -> None:
    mentor = await portal.mentor()
    student = await portal.student()
    base = datetime.now(timezone.utc) + timedelta(days=1)
    rated = await portal.completed_session(student, mentor, start=base, duration=60)
    await portal.booked_session(student, mentor, start=base + timedelta(days=1))
    cancelled = await portal.booked_session(student, mentor, start=base + timedelta(days=2))
    await portal.set_status(mentor, cancelled["id"], "cancelled")
    await client.post(
        f"/api/students/sessions/{rated['id']}/feedback",
        json={"rating": 4},
        headers=student["headers"],
    )

    stats = (await client.get("/api/mentors/stats", headers=mentor["headers"])).json()
    assert stats["total_sessions"] == 3
    assert stats["completed_sessions"] == 1
    assert stats["upcoming_sessions"] == 1
    assert stats["cancelled_sessions"] == 1
    assert stats["total_hours"] == 1.0
    assert stats["average_rating"] == 4.0
    assert stats["total_students"] == 1
    assert stats["rating_distribution"] == {"4": 1}
    assert sum(m["sessions"] for m in stats["monthly"]) == 3


@pytest.mark.asyncio
async def test_mentor_cancel_records_actor(client, portal) -> None:
    mentor = await portal.mentor()
    student = await portal.student()
    booked = await portal.booked_session(student, mentor)
    r = await portal.set_status(mentor, booked["id"], "cancelled")
    assert r.status_code == 200
    assert r.json()["session"]["cancellation"]["cancelled_by"] == "mentor"
    assert r.json()["session"]["cancellation"]["reason"] == "Cancelled by mentor"


@pytest.mark.asyncio
async def test_student_cannot_use_mentor_routes(client, portal) -> None:
    student = await portal.student()
    r = await client.get("/api/mentors/stats", headers=student["headers"])
    assert r.status_code == 404
    assert r.json()["message"] == "Mentor profile not found."
