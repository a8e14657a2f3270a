"""
Unit tests for password hashing and the two token kinds (access, password reset).
"""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest

from core.config import Settings
from core.errors import AuthenticationError, BadRequestError
from core.security import (
    create_access_token,
    create_reset_token,
    decode_access_token,
    decode_reset_token,
    hash_password,
    verify_password,
)

SETTINGS = Settings(jwt_secret="unit-secret")


def test_hash_and_verify() -> None:
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("secret123", "")
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_access_token_round_trip() -> None:
    token = create_access_token(SETTINGS, "u1", "mentor")
    payload = decode_access_token(SETTINGS, token)
    assert payload["user_id"] == "u1"
    assert payload["role"] == "mentor"


def test_expired_access_token() -> None:
    issued = datetime.now(timezone.utc) - timedelta(days=SETTINGS.jwt_expires_days + 1)
    token = create_access_token(SETTINGS, "u1", "student", now=issued)
    with pytest.raises(AuthenticationError, match="Token expired."):
        decode_access_token(SETTINGS, token)


def test_wrong_secret_is_invalid() -> None:
    token = create_access_token(Settings(jwt_secret="other"), "u1", "student")
    with pytest.raises(AuthenticationError, match="Invalid token."):
        decode_access_token(SETTINGS, token)


def test_tokens_are_not_interchangeable() -> None:
    reset = create_reset_token(SETTINGS, "u1")
    assert decode_reset_token(SETTINGS, reset) == "u1"
    with pytest.raises(AuthenticationError):
        decode_access_token(SETTINGS, reset)
    with pytest.raises(BadRequestError, match="Invalid reset token."):
        decode_reset_token(SETTINGS, create_access_token(SETTINGS, "u1", "student"))


def test_expired_reset_token() -> None:
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    token = create_reset_token(SETTINGS, "u1", now=issued)
    with pytest.raises(BadRequestError, match="Reset token expired."):
        decode_reset_token(SETTINGS, token)
