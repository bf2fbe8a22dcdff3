"""Global exception handlers for the FastAPI application.

Error bodies are always an ``ErrorResponse``. Internal details (exception
messages, stack traces) are logged server-side only and never returned.

Status mapping:
- ``RequestValidationError`` → 400 with field-keyed messages
- ``UnauthorizedError`` → 401 with ``WWW-Authenticate: Bearer``
- ``ForbiddenError`` → 403
- ``NotAcceptableError`` → 406
- Starlette ``HTTPException`` → its own status code
- anything else → 500 with a generic message
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from cityinfo.api.constants import INTERNAL_ERROR_MESSAGE
from cityinfo.api.schemas.errors import ErrorResponse, ServiceInfo
from cityinfo.api.utils.responses import ORJSONResponse
from cityinfo.core.config import Settings, get_settings
from cityinfo.core.context import RequestContext, generate_request_id
from cityinfo.core.error_context import sanitize_error_context
from cityinfo.core.exceptions import (
    CityInfoError,
    ErrorCode,
    ForbiddenError,
    NotAcceptableError,
    Severity,
    UnauthorizedError,
)


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings."""
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def create_error_response(
    status_code: int,
    error_code: str | ErrorCode,
    message: str,
    *,
    severity: Severity = Severity.MEDIUM,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> ORJSONResponse:
    """Build the standard error body for the current request.

    Args:
        status_code: HTTP status code of the response.
        error_code: Machine-readable error code.
        message: Human-readable message safe to show to clients.
        severity: Severity of the error.
        details: Extra structured information, e.g. validation errors.
        headers: Extra response headers.

    Returns:
        ORJSONResponse: The error response.
    """
    settings = get_settings()
    error_response = ErrorResponse(
        error_code=(
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        ),
        message=message,
        details=details,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=generate_request_id(),
        severity=severity.value,
        service_info=get_service_info(settings),
    )
    return ORJSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
        headers=headers,
    )


def validation_error_details(errors: list[dict[str, Any]]) -> dict[str, Any]:
    """Group Pydantic error entries by field name.

    Args:
        errors: Entries as returned by ``ValidationError.errors()``.

    Returns:
        dict[str, Any]: ``{"validation_errors": {field: [messages]}}``.
    """
    field_errors: dict[str, list[str]] = {}
    for error in errors:
        location = [str(loc) for loc in error.get("loc", ()) if loc != "__root__"]
        if location and location[0] in {"body", "query", "path", "header"}:
            location = location[1:]
        field_name = ".".join(location) or "root"
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        field_errors.setdefault(field_name, []).append(message)
    return {"validation_errors": field_errors}


async def cityinfo_error_handler(request: Request, exc: Exception) -> Response:
    """Handle CityInfoError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The CityInfoError exception to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not a CityInfoError instance
    """
    if not isinstance(exc, CityInfoError):
        raise TypeError(f"Expected CityInfoError, got {type(exc).__name__}")

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
            "fingerprint": exc.fingerprint,
        },
    )
    log = logger.warning if exc.is_expected else logger.error
    log(
        "Handling {}: {}",
        type(exc).__name__,
        exc.message,
        **error_context,
    )

    headers: dict[str, str] | None = None
    if isinstance(exc, UnauthorizedError):
        status_code = status.HTTP_401_UNAUTHORIZED
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, ForbiddenError):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, NotAcceptableError):
        status_code = status.HTTP_406_NOT_ACCEPTABLE
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    message = exc.message
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        message = INTERNAL_ERROR_MESSAGE

    return create_error_response(
        status_code,
        exc.error_code,
        message,
        severity=exc.severity,
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions as 400 responses.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: ORJSONResponse with field-level validation errors

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    details = validation_error_details(list(exc.errors()))

    logger.warning(
        "Request validation failed",
        status_code=status.HTTP_400_BAD_REQUEST,
        request_method=request.method,
        request_path=str(request.url.path),
        **details,
    )

    return create_error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.VALIDATION_ERROR,
        "Request validation failed",
        severity=Severity.LOW,
        details=details,
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException (unknown routes, wrong methods, ...).

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    error_code = ErrorCode.INTERNAL_ERROR
    severity = Severity.MEDIUM
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        error_code, severity = ErrorCode.VALIDATION_ERROR, Severity.LOW
    elif exc.status_code == status.HTTP_401_UNAUTHORIZED:
        error_code, severity = ErrorCode.UNAUTHORIZED, Severity.HIGH
    elif exc.status_code == status.HTTP_403_FORBIDDEN:
        error_code = ErrorCode.FORBIDDEN
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code, severity = ErrorCode.NOT_FOUND, Severity.LOW
    elif exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        severity = Severity.HIGH

    logger.warning(
        "HTTP exception",
        status=exc.status_code,
        request_method=request.method,
        request_path=str(request.url.path),
        detail=exc.detail,
    )

    return create_error_response(
        exc.status_code,
        error_code,
        str(exc.detail),
        severity=severity,
        headers=exc.headers,
    )


def internal_server_error_response() -> ORJSONResponse:
    """Build the generic 500 response that hides every internal detail."""
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        INTERNAL_ERROR_MESSAGE,
        severity=Severity.CRITICAL,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any unhandled exception with a generic 500 response.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with generic error message
    """
    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )
    logger.opt(exception=exc).error(
        "Unhandled exception: {}",
        type(exc).__name__,
        **error_context,
    )

    return internal_server_error_response()


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(CityInfoError, cityinfo_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
