"""Shared-secret API key check for the v1 endpoints."""

import hmac
from typing import Annotated

import structlog
from fastapi import Header, HTTPException, Request

from frontdesk.config import settings

logger = structlog.get_logger(__name__)

UNAUTHORIZED_DETAIL = "Unauthorized: Invalid or missing API Key"


def verify_api_key(api_key: str | None) -> bool:
    """
    Compare the X-API-Key header value with the configured secret.

    Args:
        api_key: Header value (None if missing)

    Returns:
        True if it matches, False otherwise (always False when no secret is configured)
    """
    if not api_key or not settings.api_secret:
        return False
    return hmac.compare_digest(api_key.encode("utf-8"), settings.api_secret.encode("utf-8"))


async def require_api_key(
    request: Request,
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """Dependency rejecting requests without a valid X-API-Key header."""
    if not verify_api_key(x_api_key):
        logger.warning("Rejected request with invalid API key", path=request.url.path)
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL)
