"""/ws relay: personal rooms, direct messages and video-call signalling."""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketState

import realtime.manager as manager_module
from realtime.manager import ConnectionManager, get_connection_manager


@pytest.fixture
def ws_client(monkeypatch: pytest.MonkeyPatch):
    from main import app

    monkeypatch.setattr(manager_module, "_manager", None)
    with TestClient(app) as c:
        yield c


def _connect(ws) -> str:
    hello = ws.receive_json()
    assert hello["event"] == "connected"
    return hello["data"]["socket_id"]


def test_connect_announces_socket_id(ws_client) -> None:
    with ws_client.websocket_connect("/ws") as ws:
        socket_id = _connect(ws)
        assert len(socket_id) == 32
        assert get_connection_manager().connection_count == 1


def test_direct_message_reaches_recipient_room(ws_client) -> None:
    with ws_client.websocket_connect("/ws") as alice, ws_client.websocket_connect("/ws") as bob:
        _connect(alice)
        _connect(bob)
        alice.send_json({"event": "join-room", "data": "user-alice"})
        assert alice.receive_json() == {"event": "room-joined", "data": {"room": "user-alice"}}

        bob.send_json({
            "event": "send-message",
            "data": {"recipient_id": "user-alice", "sender_id": "user-bob", "message": "hi"},
        })
        frame = alice.receive_json()
        assert frame["event"] == "receive-message"
        assert frame["data"]["sender_id"] == "user-bob"
        assert frame["data"]["message"] == "hi"
        assert frame["data"]["timestamp"]


def test_join_room_accepts_object_form(ws_client) -> None:
    with ws_client.websocket_connect("/ws") as ws:
        _connect(ws)
        ws.send_json({"event": "join-room", "data": {"user_id": 42}})
        assert ws.receive_json() == {"event": "room-joined", "data": {"room": "42"}}


def test_video_call_join_and_signals(ws_client) -> None:
    with ws_client.websocket_connect("/ws") as host, ws_client.websocket_connect("/ws") as guest:
        _connect(host)
        guest_id = _connect(guest)

        host.send_json({"event": "join-video-call", "data": "session-1"})
        assert host.receive_json()["event"] == "room-joined"

        guest.send_json({"event": "join-video-call", "data": {"session_id": "session-1"}})
        assert host.receive_json() == {"event": "user-joined-call", "data": guest_id}
        assert guest.receive_json() == {"event": "room-joined", "data": {"room": "session-1"}}

        guest.send_json({"event": "video-offer", "data": {"session_id": "session-1", "offer": {"sdp": "x"}}})
        assert host.receive_json() == {
            "event": "video-offer",
            "data": {"offer": {"sdp": "x"}, "from": guest_id},
        }

        guest.send_json({"event": "ice-candidate", "data": {"session_id": "session-1", "candidate": "c1"}})
        assert host.receive_json() == {
            "event": "ice-candidate",
            "data": {"candidate": "c1", "from": guest_id},
        }


def test_bad_frames_get_error_replies(ws_client) -> None:
    with ws_client.websocket_connect("/ws") as ws:
        _connect(ws)
        ws.send_text("{not json")
        assert ws.receive_json() == {"event": "error", "data": {"message": "Invalid JSON"}}

        ws.send_json({"event": "dance", "data": None})
        assert ws.receive_json() == {"event": "error", "data": {"message": "Unknown event: dance"}}

        ws.send_json({"event": "join-room", "data": None})
        assert ws.receive_json()["event"] == "error"

        ws.send_json(["no", "event"])
        assert ws.receive_json()["event"] == "error"

        ws.send_json({"event": "send-message", "data": "room-x"})
        assert ws.receive_json() == {
            "event": "error", "data": {"message": "send-message needs recipient_id"}
        }

        ws.send_json({"event": "video-offer", "data": "sess-1"})
        assert ws.receive_json() == {
            "event": "error", "data": {"message": "video-offer needs session_id"}
        }

        # the socket is still served after the bad frames
        ws.send_json({"event": "join-room", "data": "user-9"})
        assert ws.receive_json()["event"] == "room-joined"


def test_disconnect_leaves_rooms(ws_client) -> None:
    with ws_client.websocket_connect("/ws") as ws:
        socket_id = _connect(ws)
        ws.send_json({"event": "join-room", "data": "user-1"})
        ws.receive_json()
        assert get_connection_manager().members("user-1") == {socket_id}
    manager = get_connection_manager()
    assert manager.members("user-1") == set()
    assert manager.connection_count == 0


class FakeSocket:
    def __init__(self, fail: bool = False) -> None:
        self.application_state = WebSocketState.CONNECTING
        self.sent = []
        self.fail = fail

    async def accept(self) -> None:
        self.application_state = WebSocketState.CONNECTED

    async def send_json(self, data) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.mark.asyncio
async def test_emit_skips_excluded_and_broken_sockets() -> None:
    manager = ConnectionManager()
    a, b, broken = FakeSocket(), FakeSocket(), FakeSocket(fail=True)
    a_id = await manager.connect(a)
    b_id = await manager.connect(b)
    broken_id = await manager.connect(broken)
    for sid in (a_id, b_id, broken_id):
        await manager.join(sid, "room")

    delivered = await manager.emit("room", "ping", {"n": 1}, exclude=a_id)
    assert delivered == 1
    assert a.sent == []
    assert b.sent == [{"event": "ping", "data": {"n": 1}}]
    assert manager.rooms_of(b_id) == {"room"}

    await manager.disconnect(b_id)
    await manager.disconnect(a_id)
    await manager.disconnect(broken_id)
    assert manager.members("room") == set()
    assert await manager.emit("room", "ping", {}) == 0
