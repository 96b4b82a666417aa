import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from approval_engine.config import get_settings
from approval_engine.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response. The API stays up when the database is not."""

    status: Literal["ok", "degraded"]
    database: Literal["reachable", "unreachable"]
    version: str
    environment: str


async def _database_reachable(session: SessionDep) -> bool:
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Health check: database connectivity failed")
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Return the health status of the API service and its database."""
    settings = get_settings()
    reachable = await _database_reachable(session)
    return HealthResponse(
        status="ok" if reachable else "degraded",
        database="reachable" if reachable else "unreachable",
        version=settings.app_version,
        environment=settings.environment,
    )
