"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from frontdesk.api.v1 import health, patients, registrations, stats
from frontdesk.api.v1.auth import require_api_key
from frontdesk.config import settings
from frontdesk.db import dispose_engine
from frontdesk.logging import setup_logging
from frontdesk.services.sequences import SequenceError

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Front Desk API", debug=settings.debug)
    if not settings.api_secret:
        logger.warning("API_SECRET is not set; every authenticated request will be rejected")

    yield

    logger.info("Shutting down Front Desk API")
    await dispose_engine()
    logger.info("Database connections disposed")


app = FastAPI(
    title="Front Desk API",
    description="Patient records and visit registrations for the clinic front desk",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    """Sequence issuance and storage failures surface as a generic 500."""
    logger.exception("Unhandled storage failure", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_DETAIL})


app.add_exception_handler(SequenceError, _internal_error)
app.add_exception_handler(SQLAlchemyError, _internal_error)

# API routes
authenticated = [Depends(require_api_key)]
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(patients.router, prefix="/api/v1", tags=["patients"], dependencies=authenticated)
app.include_router(registrations.router, prefix="/api/v1", tags=["registrations"], dependencies=authenticated)
app.include_router(stats.router, prefix="/api/v1", tags=["stats"], dependencies=authenticated)
