"""
Application version, read from the VERSION file at the repository root.
Reported by GET /api/meta/version and the OpenAPI document.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

FALLBACK_VERSION = "0.0.0"

# major.minor.patch with an optional -prerelease suffix
SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$")


def _version_file_path() -> Path:
    # backend/version.py -> <repo>/VERSION
    return Path(__file__).resolve().parent.parent / "VERSION"


def get_version(path: Optional[Path] = None) -> str:
    """First line of the VERSION file, or FALLBACK_VERSION when it is missing or empty."""
    path = path or _version_file_path()
    if not path.is_file():
        return FALLBACK_VERSION
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return FALLBACK_VERSION
    return raw.splitlines()[0].strip() if raw else FALLBACK_VERSION


def is_semver(value: str) -> bool:
    return bool(value and SEMVER_PATTERN.match(value.strip()))
