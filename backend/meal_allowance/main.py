from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from meal_allowance.api.health import router as health_router
from meal_allowance.api.router import api_router
from meal_allowance.config import Settings, get_settings
from meal_allowance.db import dispose_engine
from meal_allowance.exceptions import setup_exception_handlers
from meal_allowance.middleware import setup_middleware
from meal_allowance.services.repository import get_repository

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Route every module logger to stderr at the configured level."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    # SQL echo is controlled by the debug flag on the engine.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Log the effective configuration on startup and release the engine on shutdown."""
    settings = get_settings()
    logger.info(
        "Starting %s v%s [%s] with %s, daily allowance %d",
        settings.app_name,
        settings.app_version,
        settings.environment,
        type(get_repository()).__name__,
        settings.daily_allowance,
    )
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("Shut down %s", settings.app_name)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    configure_logging(settings)
    show_docs = settings.environment != "production"

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
