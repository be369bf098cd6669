# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Response envelope and the domain-error → HTTP status mapping used by controllers."""
from typing import Any, Dict

from fastapi import HTTPException

from taskhub.core.errors import (
    AuthError, BadRequestError, ConflictError, ForbiddenError, NotFoundError, ServiceError,
)

STATUS_BY_ERROR = (
    (BadRequestError, 400),
    (AuthError, 401),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def success(data: Any = None, message: str = "OK") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def failure(message: str, error: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


def http_error(exc: ServiceError) -> HTTPException:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)
