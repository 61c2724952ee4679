"""
Health check endpoints.
"""

from fastapi import APIRouter

from orderflow.application.dto.responses import HealthResponse
from orderflow.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service and database health.

    Runs a trivial query through the connection pool.
    """
    from orderflow.infrastructure.storage.sqlite import get_connection

    settings = get_settings()
    database = "ok"
    try:
        async with get_connection() as conn:
            await conn.execute("SELECT 1")
    except Exception as e:
        logger.warning("health_db_unavailable", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database=database,
    )
