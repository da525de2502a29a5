"""Health endpoints for load balancers and orchestration.

``/health`` and ``/ready`` answer 503 while the database is unreachable so
that a balancer takes the instance out of rotation; ``/live`` only says the
process is serving requests.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt import __version__
from employee_mgmt.api.dependencies import AppClock, DbSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    database: str


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database unreachable: %s", exc)
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health_check(db: DbSession, clock: AppClock, response: Response) -> HealthResponse:
    """Report service and database state; 503 when degraded."""
    healthy = await _database_reachable(db)
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=__version__,
        timestamp=clock.now(),
        database="healthy" if healthy else "unhealthy",
    )


@router.get("/ready")
async def readiness_check(db: DbSession, response: Response) -> dict[str, str]:
    if not await _database_reachable(db):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "not ready"}
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
