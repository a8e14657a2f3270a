import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.environ.get(name) or "").strip().lower()
    if not v:
        return default
    if v in ("true", "1", "yes", "on"):
        return True
    if v in ("false", "0", "no", "off"):
        return False
    return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


_DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


@dataclass
class Settings:
    """Application settings loaded from environment variables with safe defaults."""

    app_name: str = "Career Mentorship Portal"
    env: str = "development"
    database_url: str = "sqlite+aiosqlite:///./mentorship.db"
    log_level: str = "INFO"

    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = 7
    reset_token_expires_minutes: int = 60

    cors_origins: List[str] = field(default_factory=lambda: list(_DEFAULT_CORS_ORIGINS))
    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    meeting_base_url: str = "https://meet.jit.si"
    mentor_auto_approve: bool = False

    rate_limit_enabled: bool = True
    rate_limit_window_minutes: int = 15
    rate_limit_general: int = 5000
    rate_limit_auth: int = 200

    @property
    def is_development(self) -> bool:
        return self.env.lower() in ("development", "dev")

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        env = os.getenv("ENV", cls.env)
        production = env.lower() == "production"
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            env=env,
            database_url=os.getenv("DATABASE_URL") or cls.database_url,
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            jwt_expires_days=_env_int("JWT_EXPIRES_DAYS", cls.jwt_expires_days),
            reset_token_expires_minutes=_env_int(
                "RESET_TOKEN_EXPIRES_MINUTES", cls.reset_token_expires_minutes
            ),
            cors_origins=_env_list("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS),
            upload_dir=os.getenv("UPLOAD_DIR", cls.upload_dir),
            max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", cls.max_upload_bytes),
            meeting_base_url=os.getenv("MEETING_BASE_URL", cls.meeting_base_url).rstrip("/"),
            mentor_auto_approve=_env_bool("MENTOR_AUTO_APPROVE", False),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            rate_limit_window_minutes=max(1, _env_int("RATE_LIMIT_WINDOW_MINUTES", 15)),
            rate_limit_general=max(1, _env_int("RATE_LIMIT_GENERAL", 1000 if production else 5000)),
            rate_limit_auth=max(1, _env_int("RATE_LIMIT_AUTH", 50 if production else 200)),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.from_env()
