"""
Health and readiness endpoints for the shop gateway.

Readiness checks configuration only; the shop backend is never called here.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from shopnet.core.config import settings
from shopnet.core.logging import get_request_id
from shopnet.core.validation import is_valid_api_base

logger = logging.getLogger("shopnet")

root_router = APIRouter(tags=["health"])


@root_router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok", "env": settings.ENV}


@root_router.get("/readyz")
def readyz():
    """Readiness check: shop backend base URL configured and well-formed."""
    if not is_valid_api_base(settings.SHOPNET_API_BASE):
        detail = "SHOPNET_API_BASE is missing or invalid"
        logger.warning(f"[readyz] {detail}", extra={"request_id": get_request_id()})
        return JSONResponse(status_code=503, content={"status": "error", "detail": detail})
    return {"status": "ok"}
