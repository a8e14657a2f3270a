"""
Room bookkeeping for connected sockets.

A socket gets a random id on connect and may join any number of rooms
(a user id for personal notifications, a session id for a video call).
Nothing is persisted: a frame sent to a room reaches whoever is in it now.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self._sockets: Dict[str, WebSocket] = {}
        self._rooms: Dict[str, Set[str]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        socket_id = uuid.uuid4().hex
        async with self._lock:
            self._sockets[socket_id] = websocket
        logger.info("Socket %s connected", socket_id)
        return socket_id

    async def disconnect(self, socket_id: str) -> None:
        async with self._lock:
            self._sockets.pop(socket_id, None)
            for room in [r for r, members in self._rooms.items() if socket_id in members]:
                members = self._rooms[room]
                members.discard(socket_id)
                if not members:
                    del self._rooms[room]
        logger.info("Socket %s disconnected", socket_id)

    async def join(self, socket_id: str, room: str) -> None:
        async with self._lock:
            self._rooms.setdefault(room, set()).add(socket_id)

    def members(self, room: str) -> Set[str]:
        return set(self._rooms.get(room, ()))

    def rooms_of(self, socket_id: str) -> Set[str]:
        return {room for room, members in self._rooms.items() if socket_id in members}

    @property
    def connection_count(self) -> int:
        return len(self._sockets)

    async def emit(
        self,
        room: str,
        event: str,
        data: Any,
        *,
        exclude: Optional[str] = None,
    ) -> int:
        """Send ``{"event", "data"}`` to every socket in ``room`` except ``exclude``.

        Returns the number of sockets the frame was handed to.
        """
        targets = [
            (sid, self._sockets[sid])
            for sid in self.members(room)
            if sid != exclude and sid in self._sockets
        ]
        delivered = 0
        for sid, websocket in targets:
            if websocket.application_state != WebSocketState.CONNECTED:
                continue
            try:
                await websocket.send_json({"event": event, "data": data})
                delivered += 1
            except RuntimeError as exc:
                logger.warning("Dropping frame %s for socket %s: %s", event, sid, exc)
        return delivered

    async def reset(self) -> None:
        async with self._lock:
            self._sockets.clear()
            self._rooms.clear()


_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Process-wide manager shared by every /ws connection."""
    global _manager
    if _manager is None:
        _manager = ConnectionManager()
    return _manager
