"""
Integration: GET /api/meta/version returns the VERSION file contents and the OpenAPI document agrees.
"""

from __future__ import annotations

import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from fastapi.testclient import TestClient

from version import get_version, is_semver


def test_meta_version_matches_version_file() -> None:
    from main import app

    expected = (_backend.parent / "VERSION").read_text(encoding="utf-8").strip()
    with TestClient(app) as client:
        r = client.get("/api/meta/version")
        assert r.status_code == 200
        assert r.json() == {"version": expected}
        assert is_semver(r.json()["version"])
        assert client.get("/openapi.json").json()["info"]["version"] == get_version()
