"""WebSocket relay for chat notifications and video-call signaling."""

from .manager import ConnectionManager, get_connection_manager
from .ws import router

__all__ = ["ConnectionManager", "get_connection_manager", "router"]
