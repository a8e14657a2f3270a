"""
/ws endpoint. Client frames are JSON objects ``{"event": <name>, "data": ...}``.

join-room          data: user id                 -> joins the user room, acked with room-joined
send-message       data: {recipient_id, sender_id, message}
                   -> receive-message {sender_id, message, timestamp} to the recipient room
join-video-call    data: session id              -> others in the room get user-joined-call
video-offer        data: {session_id, offer}     -> relayed with ``from`` = socket id
video-answer       data: {session_id, answer}
ice-candidate      data: {session_id, candidate}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from .manager import ConnectionManager, get_connection_manager

logger = logging.getLogger(__name__)

router = APIRouter()

# event name -> key of the relayed payload
_SIGNALS = {
    "video-offer": "offer",
    "video-answer": "answer",
    "ice-candidate": "candidate",
}


def _room_id(data: Any, key: str) -> Optional[str]:
    if isinstance(data, dict):
        data = data.get(key)
    if isinstance(data, (str, int)) and str(data):
        return str(data)
    return None


async def _error(websocket: WebSocket, message: str) -> None:
    await websocket.send_json({"event": "error", "data": {"message": message}})


async def handle_frame(
    manager: ConnectionManager, websocket: WebSocket, socket_id: str, frame: Any
) -> None:
    """Dispatch one decoded client frame."""
    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        await _error(websocket, "Frames must look like {\"event\": ..., \"data\": ...}")
        return
    event = frame["event"]
    data = frame.get("data")

    if event == "join-room":
        room = _room_id(data, "user_id")
        if room is None:
            await _error(websocket, "join-room needs a user id")
            return
        await manager.join(socket_id, room)
        await websocket.send_json({"event": "room-joined", "data": {"room": room}})

    elif event == "send-message":
        recipient = _room_id(data, "recipient_id") if isinstance(data, dict) else None
        if recipient is None:
            await _error(websocket, "send-message needs recipient_id")
            return
        await manager.emit(
            recipient,
            "receive-message",
            {
                "sender_id": data.get("sender_id"),
                "message": data.get("message"),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            exclude=socket_id,
        )

    elif event == "join-video-call":
        room = _room_id(data, "session_id")
        if room is None:
            await _error(websocket, "join-video-call needs a session id")
            return
        await manager.join(socket_id, room)
        await manager.emit(room, "user-joined-call", socket_id, exclude=socket_id)
        await websocket.send_json({"event": "room-joined", "data": {"room": room}})

    elif event in _SIGNALS:
        room = _room_id(data, "session_id") if isinstance(data, dict) else None
        if room is None:
            await _error(websocket, f"{event} needs session_id")
            return
        key = _SIGNALS[event]
        await manager.emit(room, event, {key: data.get(key), "from": socket_id}, exclude=socket_id)

    else:
        await _error(websocket, f"Unknown event: {event}")


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    manager = get_connection_manager()
    socket_id = await manager.connect(websocket)
    await websocket.send_json({"event": "connected", "data": {"socket_id": socket_id}})
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                await _error(websocket, "Invalid JSON")
                continue
            await handle_frame(manager, websocket, socket_id, frame)
    except WebSocketDisconnect:
        logger.debug("Socket %s closed by client", socket_id)
    finally:
        await manager.disconnect(socket_id)
