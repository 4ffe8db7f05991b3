"""Liveness endpoint for load balancers and uptime checks."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_result_cache
from core.result_cache import RedisResultCache, ResultCache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Overall status plus per-dependency detail."""

    status: str
    database: str
    result_cache: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    cache: ResultCache = Depends(get_result_cache),
) -> HealthResponse:
    """
    Report database reachability and the active result cache backend.

    Unauthenticated. A failing database reports ``degraded`` with a 200 so
    the response itself stays cheap to scrape.
    """
    database = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("health_check_database_failed")
        database = "unhealthy"

    return HealthResponse(
        status="healthy" if database == "healthy" else "degraded",
        database=database,
        result_cache="redis" if isinstance(cache, RedisResultCache) else "memory",
    )
