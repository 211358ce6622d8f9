from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import ORJSONResponse

from ..config import settings
from ..db.mongo import get_db

logger = logging.getLogger("artifact_catalog.routes.health")

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Liveness plus a Mongo round trip; 503 when the database does not answer."""
    try:
        await get_db().command("ping")
    except Exception as e:
        logger.warning("Health check: Mongo ping failed: %s", e)
        return ORJSONResponse(
            {"status": "degraded", "service": settings.service_name, "mongo": "unreachable"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return ORJSONResponse({"status": "ok", "service": settings.service_name, "mongo": "ok"})
