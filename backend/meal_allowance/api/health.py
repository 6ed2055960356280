import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from meal_allowance.config import get_settings
from meal_allowance.exceptions import RepositoryError
from meal_allowance.services.repository import get_repository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service status and the data store it reads from."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    data_store: str


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Ping the data store. An unreachable store reports degraded, not an error status."""
    settings = get_settings()
    repository = get_repository()
    status: Literal["ok", "degraded"] = "ok"

    try:
        await repository.ping()
    except RepositoryError:
        logger.exception("Health check: data store unreachable")
        status = "degraded"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        data_store=type(repository).__name__,
    )
