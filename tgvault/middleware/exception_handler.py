"""Exception handlers for structured error responses.

Every failure leaves the API as ``{"error", "message", "details"}`` with
the status class of the failure: 400 validation, 401 missing owner,
404 not found, 500 storage.
"""

import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import DatabaseError, ErrorCode, TgVaultException

logger = logging.getLogger(__name__)


async def tgvault_exception_handler(request: Request, exc: TgVaultException) -> JSONResponse:
    """
    Handle custom exceptions and return structured JSON responses.

    Args:
        request: FastAPI request object
        exc: TgVaultException instance

    Returns:
        JSONResponse with error details
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"TgVaultException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map FastAPI/Pydantic request validation failures to a 400 response."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": ErrorCode.VALIDATION_ERROR.value,
            "message": "Request validation failed",
            "details": {"errors": errors},
        },
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface unexpected storage failures as 500 with diagnostic detail.

    ``get_db`` rolls the session back; nothing is retried.
    """
    logger.error(
        "Database error",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    error = DatabaseError("Database operation failed", original_error=exc)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
