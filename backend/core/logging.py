import logging

from .config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that follow the app level, and those kept quieter.
_FOLLOW_APP_LEVEL = ("uvicorn", "uvicorn.error", "uvicorn.access", "ops_events")
_QUIET = {"sqlalchemy.engine": logging.WARNING, "aiosqlite": logging.WARNING}


def setup_logging(settings: Settings) -> None:
    """Install the root handler once and set per-logger levels from LOG_LEVEL."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)

    for name in _FOLLOW_APP_LEVEL:
        logging.getLogger(name).setLevel(level)
    if level > logging.DEBUG:
        for name, quiet_level in _QUIET.items():
            logging.getLogger(name).setLevel(quiet_level)
