import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, get_settings
from core.database import dispose_database, init_database
from core.errors import register_exception_handlers
from core.logging import setup_logging
from limits.limits import install_rate_limiting
from realtime import router as realtime_router
from routes.api import api_router
from version import get_version

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application: middleware, error handlers, /api routers and /ws."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title=settings.app_name, version=get_version())
    app.state.settings = settings

    # CORS is added last so it wraps the rate limiter and answers preflights first.
    install_rate_limiting(app, settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    register_exception_handlers(app, settings)
    app.include_router(api_router)
    app.include_router(realtime_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        await init_database(settings.database_url, create_schema=True)
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
        logger.info(
            "%s started (env=%s, cors=%s)", settings.app_name, settings.env, settings.cors_origins
        )

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await dispose_database()
        logger.info("Application shutdown complete")

    return app


app = create_app()
