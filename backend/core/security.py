"""Password hashing (bcrypt) and signed tokens (PyJWT)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from .config import Settings
from .errors import AuthenticationError, BadRequestError

RESET_PURPOSE = "password_reset"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(
    settings: Settings,
    user_id: str,
    role: str,
    now: Optional[datetime] = None,
) -> str:
    """Issue the bearer token consumed by the auth dependency."""
    issued = now or datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "role": role,
        "iat": issued,
        "exp": issued + timedelta(days=settings.jwt_expires_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """Decode a bearer token. Raises AuthenticationError (401) on any failure."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired.") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token.") from e
    if payload.get("purpose") == RESET_PURPOSE or not payload.get("user_id"):
        raise AuthenticationError("Invalid token.")
    return payload


def create_reset_token(settings: Settings, user_id: str, now: Optional[datetime] = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "purpose": RESET_PURPOSE,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.reset_token_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_reset_token(settings: Settings, token: str) -> str:
    """Return the user id carried by a reset token. Raises BadRequestError (400)."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise BadRequestError("Reset token expired.") from e
    except jwt.InvalidTokenError as e:
        raise BadRequestError("Invalid reset token.") from e
    if payload.get("purpose") != RESET_PURPOSE or not payload.get("user_id"):
        raise BadRequestError("Invalid reset token.")
    return str(payload["user_id"])
