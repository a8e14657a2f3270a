"""
Process entrypoint: serve the API with uvicorn, or run an operator command and exit.

  python backend_entry.py                              -> serve on HOST:PORT (default 0.0.0.0:5000)
  python backend_entry.py --ops init-db                -> create missing tables, exit
  python backend_entry.py --ops approve-all-mentors    -> approve every pending/rejected mentor, exit

Configuration comes from the same environment variables as the app (core.config).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

_backend_dir = Path(__file__).resolve().parent
if str(_backend_dir) not in sys.path:
    sys.path.insert(0, str(_backend_dir))

from core.config import get_settings
from core.database import dispose_database, get_database_manager, init_database
from core.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000


async def _init_db() -> int:
    settings = get_settings()
    await init_database(settings.database_url, create_schema=True)
    await dispose_database()
    logger.info("Schema ready at %s", settings.database_url)
    return 0


async def _approve_all_mentors() -> int:
    from services import admin_service

    settings = get_settings()
    await init_database(settings.database_url, create_schema=True)
    try:
        async with get_database_manager().session() as session:
            updated = await admin_service.approve_all_mentors(session)
    finally:
        await dispose_database()
    print(f"Mentors updated: {updated}")
    return 0


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mentorship portal: server or ops subcommand")
    parser.add_argument(
        "--ops",
        choices=["init-db", "approve-all-mentors"],
        help="Run an operator command and exit (no server)",
    )
    parser.add_argument("--host", default=os.environ.get("HOST", DEFAULT_HOST))
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", DEFAULT_PORT)))
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    if args.ops == "init-db":
        return asyncio.run(_init_db())
    if args.ops == "approve-all-mentors":
        return asyncio.run(_approve_all_mentors())

    import uvicorn

    logger.info("Starting %s on %s:%s (env=%s)", settings.app_name, args.host, args.port, settings.env)
    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
