"""Session life cycle over HTTP: booking, transitions, completion, feedback, chat."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest


def _at(days: int, hour: int = 10) -> datetime:
    base = datetime.now(timezone.utc).replace(hour=hour, minute=0, second=0, microsecond=0)
    return base + timedelta(days=days)


@pytest.mark.asyncio
async def test_book_session_with_approved_mentor(client, portal) -> None:
    """A video call booking is scheduled and gets its meeting link."""
    student = await portal.student()
    mentor = await portal.mentor()
    r = await portal.book(student, mentor)
    assert r.status_code == 201, r.text
    session = r.json()["session"]
    assert session["status"] == "scheduled"
    assert session["mentor_id"] == mentor["mentor_id"]
    assert session["student_id"] == student["student_id"]
    assert session["meeting_id"] == f"mentorship-{session['id']}"
    assert session["meeting_link"] == f"https://meet.jit.si/mentorship-{session['id']}"
    assert session["is_upcoming"] is True
    assert session["mentor"]["user"]["id"] == mentor["user"]["id"]


@pytest.mark.asyncio
async def test_chat_booking_has_no_meeting_link(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    session = await portal.booked_session(student, mentor, session_type="chat")
    assert session["meeting_link"] == ""
    assert session["meeting_id"] == ""


@pytest.mark.asyncio
async def test_booking_pending_mentor_rejected_without_side_effects(client, portal) -> None:
    """Booking with a mentor who is not approved fails and creates nothing."""
    student = await portal.student()
    mentor = await portal.mentor(approve=False)
    r = await portal.book(student, mentor)
    assert r.status_code == 404
    assert r.json()["message"] == "Mentor not available."

    listing = await client.get("/api/students/sessions", headers=student["headers"])
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_booking_same_start_rejected(client, portal) -> None:
    """A second booking at the same start as an open session of the student is a clash."""
    student = await portal.student()
    mentor = await portal.mentor()
    other = await portal.mentor()
    start = _at(3)
    await portal.booked_session(student, mentor, start=start)

    r = await portal.book(student, other, start=start)
    assert r.status_code == 400
    assert r.json()["message"] == "You already have a session scheduled at this time."


@pytest.mark.asyncio
async def test_booking_clash_only_counts_starts_inside_window(client, portal) -> None:
    """An existing session starting before the new window does not block it."""
    student = await portal.student()
    mentor = await portal.mentor()
    start = _at(4, hour=10)
    await portal.booked_session(student, mentor, start=start, duration=120)

    later = await portal.book(student, mentor, start=start + timedelta(minutes=30))
    assert later.status_code == 201, later.text

    earlier = await portal.book(student, mentor, start=start - timedelta(minutes=30), duration=60)
    assert earlier.status_code == 400


@pytest.mark.asyncio
async def test_cancelled_session_does_not_block_rebooking(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    start = _at(5)
    booked = await portal.booked_session(student, mentor, start=start)
    r = await client.put(
        f"/api/students/sessions/{booked['id']}/cancel",
        json={"reason": "Exam clash"},
        headers=student["headers"],
    )
    assert r.status_code == 200
    cancelled = r.json()["session"]
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancellation"]["cancelled_by"] == "student"
    assert cancelled["cancellation"]["reason"] == "Exam clash"

    again = await portal.book(student, mentor, start=start)
    assert again.status_code == 201


@pytest.mark.asyncio
async def test_booking_validation(client, portal) -> None:
    """Durations outside 30..180 minutes are rejected."""
    student = await portal.student()
    mentor = await portal.mentor()
    r = await portal.book(student, mentor, duration=20)
    assert r.status_code == 400
    assert r.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_blank_title_rejected_after_trimming(client, portal) -> None:
    """Surrounding whitespace is trimmed before the non-empty check."""
    student = await portal.student()
    mentor = await portal.mentor()
    r = await client.post(
        "/api/students/sessions",
        json={
            "mentor_id": mentor["mentor_id"],
            "title": "   ",
            "description": "Stream choice",
            "scheduled_date": _at(2).isoformat(),
            "duration": 60,
            "session_type": "chat",
        },
        headers=student["headers"],
    )
    assert r.status_code == 400
    assert "body.title" in {e["field"] for e in r.json()["errors"]}

    r = await client.post(
        "/api/students/sessions",
        json={
            "mentor_id": mentor["mentor_id"],
            "title": "  Stream choice  ",
            "description": "  Science or commerce  ",
            "scheduled_date": _at(2).isoformat(),
            "duration": 60,
            "session_type": "chat",
        },
        headers=student["headers"],
    )
    assert r.status_code == 201, r.text
    assert r.json()["session"]["title"] == "Stream choice"
    assert r.json()["session"]["description"] == "Science or commerce"


@pytest.mark.asyncio
async def test_past_scheduled_session_is_overdue(client, portal) -> None:
    """A session left scheduled after its start is overdue until it is completed."""
    student = await portal.student()
    mentor = await portal.mentor()
    booked = await portal.booked_session(student, mentor, start=_at(-2))
    assert booked["status"] == "scheduled"
    assert booked["is_overdue"] is True
    assert booked["is_upcoming"] is False

    future = await portal.booked_session(student, mentor, start=_at(3))
    assert future["is_overdue"] is False

    r = await portal.set_status(mentor, booked["id"], "completed")
    assert r.status_code == 200, r.text
    completed = r.json()["session"]
    assert completed["is_overdue"] is False
    assert completed["is_upcoming"] is False


@pytest.mark.asyncio
async def test_cancel_twice_and_foreign_cancel(client, portal) -> None:
    owner = await portal.student()
    stranger = await portal.student()
    mentor = await portal.mentor()
    booked = await portal.booked_session(owner, mentor)

    r = await client.put(f"/api/students/sessions/{booked['id']}/cancel", headers=stranger["headers"])
    assert r.status_code == 403

    r = await client.put(f"/api/students/sessions/{booked['id']}/cancel", headers=owner["headers"])
    assert r.status_code == 200
    assert r.json()["session"]["cancellation"]["reason"] == "Cancelled by student"

    r = await client.put(f"/api/students/sessions/{booked['id']}/cancel", headers=owner["headers"])
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_mentor_transitions_forward_only(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    booked = await portal.booked_session(student, mentor)

    r = await portal.set_status(mentor, booked["id"], "confirmed", notes="See you then")
    assert r.status_code == 200
    session = r.json()["session"]
    assert session["status"] == "confirmed"
    assert session["notes"]["mentor"] == "See you then"

    r = await portal.set_status(mentor, booked["id"], "in-progress")
    assert r.status_code == 200
    assert r.json()["session"]["actual_start_time"] is not None

    r = await portal.set_status(mentor, booked["id"], "confirmed")
    assert r.status_code == 400

    r = await portal.set_status(mentor, booked["id"], "no-show")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_terminal_sessions_never_move(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    booked = await portal.booked_session(student, mentor)
    assert (await portal.set_status(mentor, booked["id"], "no-show")).status_code == 200
    r = await portal.set_status(mentor, booked["id"], "completed")
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot change session status from 'no-show' to 'completed'."


@pytest.mark.asyncio
async def test_other_mentor_cannot_update_status(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    other = await portal.mentor()
    booked = await portal.booked_session(student, mentor)
    r = await portal.set_status(other, booked["id"], "confirmed")
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_pending_mentor_cannot_use_mentor_routes(client, portal) -> None:
    mentor = await portal.mentor(approve=False)
    r = await client.get("/api/mentors/sessions", headers=mentor["headers"])
    assert r.status_code == 403
    assert r.json()["message"] == "Mentor account not yet approved by admin."


@pytest.mark.asyncio
async def test_completion_without_start_uses_scheduled_date(client, portal) -> None:
    """Completing straight from scheduled stamps start = scheduled date and a non-negative duration."""
    student = await portal.student()
    mentor = await portal.mentor()
    start = datetime.now(timezone.utc).replace(microsecond=0) - timedelta(minutes=45)
    booked = await portal.booked_session(student, mentor, start=start)

    r = await portal.set_status(mentor, booked["id"], "completed")
    assert r.status_code == 200
    session = r.json()["session"]
    assert session["status"] == "completed"
    assert datetime.fromisoformat(session["actual_start_time"]) == start
    assert session["actual_end_time"] is not None
    assert 44 <= session["actual_duration"] <= 47


@pytest.mark.asyncio
async def test_completion_of_future_session_clamps_duration_to_zero(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    completed = await portal.completed_session(student, mentor, start=_at(2))
    assert completed["actual_duration"] == 0


@pytest.mark.asyncio
async def test_completion_updates_mentor_and_student_totals(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    await portal.completed_session(student, mentor, start=_at(2), duration=90)
    await portal.completed_session(student, mentor, start=_at(3), duration=30)

    profile = (await client.get("/api/mentors/profile", headers=mentor["headers"])).json()
    assert profile["stats"]["total_sessions"] == 2
    assert profile["stats"]["students_mentored"] == 1
    # zero measured minutes fall back to the booked duration
    assert profile["stats"]["total_hours"] == pytest.approx(2.0)

    me = (await client.get("/api/students/profile", headers=student["headers"])).json()
    assert me["progress"]["total_sessions"] == 2


@pytest.mark.asyncio
async def test_feedback_requires_completed_session(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    booked = await portal.booked_session(student, mentor)
    r = await client.post(
        f"/api/students/sessions/{booked['id']}/feedback",
        json={"rating": 5},
        headers=student["headers"],
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Can only submit feedback for completed sessions."


@pytest.mark.asyncio
async def test_feedback_once_per_side(client, portal) -> None:
    """Each side may rate once; the repeat is rejected and changes nothing."""
    student = await portal.student()
    mentor = await portal.mentor()
    completed = await portal.completed_session(student, mentor)
    sid = completed["id"]

    first = await client.post(
        f"/api/students/sessions/{sid}/feedback",
        json={"rating": 4, "comment": "Very helpful"},
        headers=student["headers"],
    )
    assert first.status_code == 200
    assert first.json()["session"]["feedback"]["student"]["rating"] == 4

    again = await client.post(
        f"/api/students/sessions/{sid}/feedback",
        json={"rating": 1, "comment": "Changed my mind"},
        headers=student["headers"],
    )
    assert again.status_code == 400
    assert again.json()["message"] == "Feedback already submitted for this session."

    mentor_side = await client.post(
        f"/api/mentors/sessions/{sid}/feedback",
        json={"rating": 5, "comment": "Well prepared"},
        headers=mentor["headers"],
    )
    assert mentor_side.status_code == 200
    feedback = mentor_side.json()["session"]["feedback"]
    assert feedback["student"]["rating"] == 4
    assert feedback["student"]["comment"] == "Very helpful"
    assert feedback["mentor"]["rating"] == 5

    profile = (await client.get("/api/mentors/profile", headers=mentor["headers"])).json()
    assert profile["ratings"]["total_reviews"] == 1
    assert profile["ratings"]["average"] == 4.0


@pytest.mark.asyncio
async def test_feedback_from_non_participant_forbidden(client, portal) -> None:
    student = await portal.student()
    stranger = await portal.student()
    mentor = await portal.mentor()
    completed = await portal.completed_session(student, mentor)
    r = await client.post(
        f"/api/students/sessions/{completed['id']}/feedback",
        json={"rating": 3},
        headers=stranger["headers"],
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_mentor_rating_average_is_rounded_mean(client, portal) -> None:
    """Average over 5, 4 and 4 is 4.333... and is stored as 4.3."""
    mentor = await portal.mentor()
    for rating in (5, 4, 4):
        student = await portal.student()
        completed = await portal.completed_session(student, mentor)
        r = await client.post(
            f"/api/sessions/{completed['id']}/feedback",
            json={"rating": rating},
            headers=student["headers"],
        )
        assert r.status_code == 200, r.text

    directory = (await client.get("/api/mentors")).json()
    listed = next(m for m in directory["mentors"] if m["id"] == mentor["mentor_id"])
    assert listed["ratings"]["average"] == 4.3
    assert listed["ratings"]["total_reviews"] == 3
    assert [rv["rating"] for rv in listed["ratings"]["reviews"]] == [5, 4, 4]


@pytest.mark.asyncio
async def test_session_read_access(client, portal) -> None:
    student = await portal.student()
    stranger = await portal.student()
    mentor = await portal.mentor()
    admin = await portal.admin()
    booked = await portal.booked_session(student, mentor)

    for account in (student, mentor, admin):
        r = await client.get(f"/api/sessions/{booked['id']}", headers=account["headers"])
        assert r.status_code == 200
    r = await client.get(f"/api/sessions/{booked['id']}", headers=stranger["headers"])
    assert r.status_code == 403

    r = await client.get("/api/sessions/does-not-exist", headers=admin["headers"])
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_admin_update_session(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    admin = await portal.admin()
    booked = await portal.booked_session(student, mentor)

    r = await client.put(
        f"/api/sessions/{booked['id']}",
        json={"status": "confirmed", "notes": "Checked by admin"},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    session = r.json()["session"]
    assert session["status"] == "confirmed"
    assert session["notes"]["admin"] == "Checked by admin"

    same = await client.put(
        f"/api/sessions/{booked['id']}", json={"status": "confirmed"}, headers=admin["headers"]
    )
    assert same.status_code == 400

    backwards = await client.put(
        f"/api/sessions/{booked['id']}", json={"status": "scheduled"}, headers=admin["headers"]
    )
    assert backwards.status_code == 400

    forbidden = await client.put(
        f"/api/sessions/{booked['id']}", json={"status": "cancelled"}, headers=student["headers"]
    )
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_admin_session_listing_filters_by_status(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    admin = await portal.admin()
    await portal.booked_session(student, mentor, start=_at(2))
    await portal.completed_session(student, mentor, start=_at(3))

    everything = (await client.get("/api/sessions", headers=admin["headers"])).json()
    assert everything["total"] == 2
    done = (await client.get("/api/sessions?status=completed", headers=admin["headers"])).json()
    assert done["total"] == 1
    assert done["sessions"][0]["status"] == "completed"


@pytest.mark.asyncio
async def test_session_chat_between_participants(client, portal) -> None:
    student = await portal.student()
    stranger = await portal.student()
    mentor = await portal.mentor()
    booked = await portal.booked_session(student, mentor)
    url = f"/api/sessions/{booked['id']}/chat"

    r = await client.post(url, json={"message": "Hello mentor"}, headers=student["headers"])
    assert r.status_code == 200
    assert r.json()["chat"]["sender"] == "student"
    r = await client.post(url, json={"message": "Hi!"}, headers=mentor["headers"])
    assert r.json()["chat"]["sender"] == "mentor"

    history = (await client.get(url, headers=mentor["headers"])).json()["chat_history"]
    assert [m["message"] for m in history] == ["Hello mentor", "Hi!"]

    assert (await client.post(url, json={"message": "  "}, headers=student["headers"])).status_code == 400
    assert (await client.get(url, headers=stranger["headers"])).status_code == 403


@pytest.mark.asyncio
async def test_mentor_upcoming_and_recent(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    await portal.booked_session(student, mentor, start=_at(6))
    await portal.booked_session(student, mentor, start=_at(2))
    await portal.completed_session(student, mentor, start=_at(-3))

    upcoming = (await client.get("/api/mentors/sessions/upcoming", headers=mentor["headers"])).json()
    assert len(upcoming) == 2
    assert upcoming[0]["scheduled_date"] < upcoming[1]["scheduled_date"]

    recent = (await client.get("/api/mentors/sessions/recent", headers=mentor["headers"])).json()
    assert [s["status"] for s in recent] == ["completed"]


@pytest.mark.asyncio
async def test_session_info_is_public(client, test_db) -> None:
    r = await client.get("/api/sessions/info")
    assert r.status_code == 200
    assert r.json()["message"] == "Session Management API"
