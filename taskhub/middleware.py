# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP Middleware — correlation id propagation, request logging and Prometheus metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from taskhub.core.logging import correlation_id_var, get_logger
from taskhub.metrics import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

KNOWN_SEGMENTS: set[str] = {
    "api", "health", "ready", "metrics", "auth", "register", "login",
    "reset-password", "reset-password-auth", "profile", "admin", "users", "user",
    "tasks", "promote", "demote", "assign-team", "remove-team", "dashboard",
    "task-stats", "user-stats", "managers", "teams", "tasks-by-user", "manager",
    "team", "add-user", "remove-user", "stats", "available-users", "members",
    "remove", "notifications", "read", "read-all", "status", "priority",
}

SKIP_PATHS: tuple[str, ...] = (
    "/api/health", "/api/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
)


def normalize_path(path: str) -> str:
    """Collapse ids in a path to `{param}` so metric label cardinality stays bounded."""
    parts = path.strip("/").split("/")
    if parts == [""]:
        return path
    return "/" + "/".join(p if p in KNOWN_SEGMENTS else "{param}" for p in parts)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate X-Correlation-ID and expose it to the logger."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request: method, path, status, duration."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000
        if request.url.path not in SKIP_PATHS:
            logger.info("%s %s -> %d (%.1fms)", request.method, request.url.path,
                        response.status_code, duration_ms)
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Track request count, latency, and error rate via Prometheus."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        if path not in SKIP_PATHS:
            normalized = normalize_path(path)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=normalized,
                status=str(response.status_code),
            ).inc()
            REQUEST_LATENCY.labels(
                method=request.method,
                endpoint=normalized,
            ).observe(duration)
            if response.status_code >= 400:
                HTTP_ERRORS.labels(
                    method=request.method,
                    endpoint=normalized,
                    status=str(response.status_code),
                ).inc()

        return response
