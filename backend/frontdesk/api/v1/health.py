"""Health check endpoints."""

import structlog
from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from frontdesk.api.v1.dependencies import SessionDep

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health", operation_id="healthCheck")
async def health_check(session: SessionDep, response: Response) -> dict[str, str]:
    """Liveness plus a round trip to the database. No API key required."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed", error=str(e))
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unhealthy", "database": "unavailable"}
    return {"status": "healthy", "database": "ok"}
