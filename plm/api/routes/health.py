"""Health check endpoints.

``/health`` and ``/health/live`` only prove the process answers;
``/health/ready`` also checks the database.
"""

from fastapi import APIRouter

from plm import __version__
from plm.api.deps import DB
from plm.config import settings
from plm.infra.logging import get_logger
from plm.schemas import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic health check. Returns 200 if the service is running."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={},
    )


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready(db: DB) -> HealthResponse:
    """Readiness check.

    Verifies the database accepts connections.
    """
    checks = {"database": await db.verify_connection()}

    all_healthy = all(checks.values())
    if not all_healthy:
        logger.warning("Readiness check degraded", checks=checks)

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health/live", response_model=HealthResponse)
async def health_live() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={"alive": True},
    )
