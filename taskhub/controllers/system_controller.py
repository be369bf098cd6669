# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pymongo.errors import PyMongoError
from starlette.responses import Response

from taskhub.core.config import settings
from taskhub.core.dependencies import get_user_repo
from taskhub.core.logging import get_logger
from taskhub.core.responses import success
from taskhub.repositories.user_repository import UserRepository

logger = get_logger(__name__)

router = APIRouter(tags=["System"])


@router.get(f"{settings.API_PREFIX}/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    return success({
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }, "Service is healthy")


@router.get(f"{settings.API_PREFIX}/health/ready")
def readiness_check(repo: UserRepository = Depends(get_user_repo)):
    """Readiness probe — verifies the database answers a ping."""
    try:
        repo.verify_connection()
    except PyMongoError as exc:
        logger.error("Readiness check failed: %s", exc)
        raise HTTPException(status_code=503, detail=f"Database unavailable: {exc}")
    return success({"status": "ready", "database": "connected"}, "Service is ready")


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
