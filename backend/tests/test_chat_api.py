"""Chat: global wall, student-mentor conversations, unread counts and broadcasts."""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest


@pytest.mark.asyncio
async def test_global_wall_newest_first(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    r = await client.post("/api/chat/global", json={"content": "Hello everyone"}, headers=student["headers"])
    assert r.status_code == 201
    assert r.json()["broadcast_title"] == "Global Message"
    await client.post(
        "/api/chat/global", json={"content": "Office hours today", "title": "Notice"}, headers=mentor["headers"]
    )

    wall = (await client.get("/api/chat/global", headers=student["headers"])).json()
    assert wall["total"] == 2
    assert [m["content"] for m in wall["messages"]] == ["Office hours today", "Hello everyone"]

    empty = await client.post("/api/chat/global", json={"content": "   "}, headers=student["headers"])
    assert empty.status_code == 400
    assert empty.json()["message"] == "Message content is required"


@pytest.mark.asyncio
async def test_conversation_flow_and_unread(client, portal) -> None:
    student = await portal.student()
    mentor = await portal.mentor()
    r = await client.post(
        "/api/chat/conversations",
        json={"mentor_id": mentor["user"]["id"], "initial_message": "Can we talk about NEET?"},
        headers=student["headers"],
    )
    assert r.status_code == 201
    conversation = r.json()
    assert conversation["student_id"] == student["user"]["id"]
    assert conversation["mentor_id"] == mentor["user"]["id"]
    assert conversation["last_message"]["content"] == "Can we talk about NEET?"

    reused = await client.post(
        "/api/chat/conversations", json={"mentor_id": mentor["user"]["id"]}, headers=student["headers"]
    )
    assert reused.json()["id"] == conversation["id"]

    unread = (await client.get("/api/chat/unread-count", headers=mentor["headers"])).json()
    assert unread == {"unread_count": 1}

    listed = (await client.get("/api/chat/conversations", headers=mentor["headers"])).json()
    assert [c["id"] for c in listed] == [conversation["id"]]

    url = f"/api/chat/conversations/{conversation['id']}/messages"
    reply = await client.post(url, json={"content": "Sure, tomorrow?"}, headers=mentor["headers"])
    assert reply.status_code == 201

    messages = (await client.get(url, headers=student["headers"])).json()
    assert [m["content"] for m in messages] == ["Can we talk about NEET?", "Sure, tomorrow?"]

    marked = await client.put(f"/api/chat/conversations/{conversation['id']}/read", headers=mentor["headers"])
    assert marked.json()["updated"] == 1
    assert (await client.get("/api/chat/unread-count", headers=mentor["headers"])).json() == {"unread_count": 0}
    assert (await client.get("/api/chat/unread-count", headers=student["headers"])).json() == {"unread_count": 1}


@pytest.mark.asyncio
async def test_conversation_is_private(client, portal) -> None:
    student = await portal.student()
    outsider = await portal.student()
    mentor = await portal.mentor()
    conversation = (
        await client.post(
            "/api/chat/conversations", json={"mentor_id": mentor["user"]["id"]}, headers=student["headers"]
        )
    ).json()
    url = f"/api/chat/conversations/{conversation['id']}/messages"
    assert (await client.get(url, headers=outsider["headers"])).status_code == 403
    assert (await client.post(url, json={"content": "hi"}, headers=outsider["headers"])).status_code == 403
    assert (await client.get("/api/chat/conversations/missing/messages", headers=student["headers"])).status_code == 404


@pytest.mark.asyncio
async def test_start_conversation_rules(client, portal) -> None:
    student = await portal.student()
    other = await portal.student()
    mentor = await portal.mentor()

    not_mentor = await client.post(
        "/api/chat/conversations", json={"mentor_id": other["user"]["id"]}, headers=student["headers"]
    )
    assert not_mentor.status_code == 404

    missing = await client.post("/api/chat/conversations", json={}, headers=student["headers"])
    assert missing.status_code == 400

    by_mentor = await client.post(
        "/api/chat/conversations", json={"mentor_id": mentor["user"]["id"]}, headers=mentor["headers"]
    )
    assert by_mentor.status_code == 403


@pytest.mark.asyncio
async def test_student_broadcast(client, portal) -> None:
    sender = await portal.student()
    first = await portal.student()
    second = await portal.student()
    mentor = await portal.mentor()

    r = await client.post(
        "/api/chat/broadcast", json={"content": "Study group at 6?"}, headers=sender["headers"]
    )
    assert r.status_code == 201
    assert r.json()["sent_to"] == 2

    for account in (first, second):
        inbox = (await client.get("/api/chat/broadcast", headers=account["headers"])).json()
        assert [m["content"] for m in inbox] == ["Study group at 6?"]
        assert inbox[0]["broadcast_title"] == "Student Broadcast"
    assert (await client.get("/api/chat/broadcast", headers=sender["headers"])).json() == []

    assert (
        await client.post("/api/chat/broadcast", json={"content": "hi"}, headers=mentor["headers"])
    ).status_code == 403
    assert (await client.get("/api/chat/broadcast", headers=mentor["headers"])).status_code == 403


@pytest.mark.asyncio
async def test_broadcast_without_recipients_404(client, portal) -> None:
    lonely = await portal.student()
    r = await client.post("/api/chat/broadcast", json={"content": "Anyone?"}, headers=lonely["headers"])
    assert r.status_code == 404
    assert r.json()["message"] == "No other students found"
