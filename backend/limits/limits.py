"""
Request rate limits: fixed window per client address.
Two scopes share one store: "general" (every limited route) and "auth"
(an extra, stricter quota on /api/auth). Limits come from Settings.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.config import Settings
from ops.ops_events import log_rate_limit_rejected

GENERAL_SCOPE = "general"
AUTH_SCOPE = "auth"

# Paths never counted against any quota.
_EXEMPT_PREFIXES = ("/api/health", "/uploads")
_AUTH_PREFIX = "/api/auth"

_GENERAL_MESSAGE = "Too many requests from this IP, please try again later."
_AUTH_MESSAGE = "Too many authentication attempts, please try again later."


@dataclass
class WindowState:
    started_at: float
    count: int


@dataclass(frozen=True)
class Decision:
    allowed: bool
    remaining: int
    reset_in_seconds: float


class FixedWindowLimiter:
    """Counts hits per (scope, client) inside a window of ``window_seconds``.

    Expired windows are swept once the map holds ``prune_threshold`` entries.
    """

    def __init__(
        self,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        prune_threshold: int = 512,
    ) -> None:
        self.window_seconds = window_seconds
        self.prune_threshold = prune_threshold
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[Tuple[str, str], WindowState] = {}

    def __len__(self) -> int:
        return len(self._windows)

    def _prune(self, now: float) -> None:
        expired = [
            key for key, state in self._windows.items()
            if now - state.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def hit(self, scope: str, client: str, limit: int) -> Decision:
        now = self._clock()
        key = (scope, client)
        with self._lock:
            if len(self._windows) >= self.prune_threshold:
                self._prune(now)
            state = self._windows.get(key)
            if state is None or now - state.started_at >= self.window_seconds:
                state = WindowState(started_at=now, count=0)
                self._windows[key] = state
            reset_in = max(0.0, self.window_seconds - (now - state.started_at))
            if state.count >= limit:
                return Decision(allowed=False, remaining=0, reset_in_seconds=reset_in)
            state.count += 1
            return Decision(allowed=True, remaining=limit - state.count, reset_in_seconds=reset_in)

    def snapshot(self, client: str) -> Dict[str, int]:
        with self._lock:
            return {
                scope: state.count
                for (scope, key_client), state in self._windows.items()
                if key_client == client
            }

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter: Optional[FixedWindowLimiter] = None
_limiter_lock = threading.Lock()


def get_limiter(settings: Settings) -> FixedWindowLimiter:
    """Process-wide limiter, created on first use with the configured window."""
    global _limiter
    with _limiter_lock:
        if _limiter is None:
            _limiter = FixedWindowLimiter(settings.rate_limit_window_minutes * 60)
        return _limiter


def reset_rate_limits() -> None:
    """Drop every counter and the limiter itself (for tests)."""
    global _limiter
    with _limiter_lock:
        if _limiter is not None:
            _limiter.reset()
        _limiter = None


def describe_limits(settings: Settings) -> Dict[str, str]:
    """Human-readable quotas as reported by the health endpoint."""
    window = settings.rate_limit_window_minutes
    return {
        GENERAL_SCOPE: f"{settings.rate_limit_general} requests per {window} minutes",
        AUTH_SCOPE: f"{settings.rate_limit_auth} requests per {window} minutes",
    }


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _too_many(message: str, reset_in_seconds: float) -> JSONResponse:
    retry_minutes = max(1, math.ceil(reset_in_seconds / 60))
    return JSONResponse(
        status_code=429,
        content={"error": message, "retry_after_minutes": retry_minutes},
        headers={"Retry-After": str(math.ceil(reset_in_seconds))},
    )


def install_rate_limiting(app: FastAPI, settings: Settings) -> None:
    """Register the HTTP middleware that enforces both quotas."""
    if not settings.rate_limit_enabled:
        return

    @app.middleware("http")
    async def _rate_limit(request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or path.startswith(_EXEMPT_PREFIXES):
            return await call_next(request)

        limiter = get_limiter(settings)
        client = client_address(request)

        decision = limiter.hit(GENERAL_SCOPE, client, settings.rate_limit_general)
        if not decision.allowed:
            log_rate_limit_rejected(client, GENERAL_SCOPE, settings.rate_limit_general, path)
            return _too_many(_GENERAL_MESSAGE, decision.reset_in_seconds)

        if path.startswith(_AUTH_PREFIX):
            decision = limiter.hit(AUTH_SCOPE, client, settings.rate_limit_auth)
            if not decision.allowed:
                log_rate_limit_rejected(client, AUTH_SCOPE, settings.rate_limit_auth, path)
                return _too_many(_AUTH_MESSAGE, decision.reset_in_seconds)

        return await call_next(request)
