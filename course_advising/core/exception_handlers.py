"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses (SRP, OCP for adding new handlers).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from course_advising.core.config import get_settings
from course_advising.domain.exceptions import AdvisingAppException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "MISSING_OWNER": 400,
    "MISSING_FIELDS": 400,
    "INVALID_DECISION": 400,
    "EMPTY_FEEDBACK": 400,
    "RESOURCE_NOT_FOUND": 404,
    "NOT_PENDING": 403,
    "ALREADY_REVIEWED": 409,
    "EMAIL_ALREADY_REGISTERED": 409,
    "AUTHENTICATION_ERROR": 401,
    "NO_PENDING_CHALLENGE": 401,
    "CHALLENGE_EXPIRED": 401,
    "CODE_MISMATCH": 401,
    "ACCOUNT_NOT_VERIFIED": 403,
    "DEPENDENCY_ERROR": 503,
}


def status_for(exc: AdvisingAppException) -> int:
    """Return the HTTP status for a domain exception (400 when unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _domain_exception_handler(
    request: Request, exc: AdvisingAppException
) -> JSONResponse:
    """Return JSON from AdvisingAppException.to_dict() with appropriate status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("Dependency failure: %s (%s)", exc.message, exc.details)
        # Dependency details stay in the log; the client sees a generic body.
        return JSONResponse(
            status_code=status,
            content={"error": exc.error_code, "message": exc.message, "details": {}},
        )
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Return 503 for storage failures without leaking driver messages."""
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=503,
        content={"error": "DEPENDENCY_ERROR", "message": "Server error", "details": {}},
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Return pydantic error dicts with non-JSON context values stringified."""
    errors = []
    for err in exc.errors():
        item = dict(err)
        if "ctx" in item:
            item["ctx"] = {k: str(v) for k, v in item["ctx"].items()}
        errors.append(item)
    return errors


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: AdvisingAppException (and
    subclasses), SQLAlchemyError, RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(AdvisingAppException, _domain_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _database_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
