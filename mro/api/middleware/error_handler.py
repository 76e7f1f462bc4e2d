"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from mro.application.dto.responses import ErrorResponse
from mro.config import get_logger
from mro.core.exceptions import (
    ConfigurationError,
    InsufficientQuantityError,
    LedgerInconsistencyError,
    MROError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    UnauthenticatedError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes (first match wins)
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientQuantityError: status.HTTP_400_BAD_REQUEST,
    LedgerInconsistencyError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "UNAUTHENTICATED": "Sign in again and send the session token as a Bearer header.",
    "PERMISSION_DENIED": "Ask a company administrator for the missing permission.",
    "STOCK_ITEM_NOT_FOUND": "Check the item ID and try GET /api/stock-inventory to list items.",
    "WHEEL_ROTATION_NOT_FOUND": "Check the wheel ID and try GET /api/wheel-rotation to list wheels.",
    "INVALID_QUANTITY": "usedQuantity must be a positive whole number.",
    "INSUFFICIENT_QUANTITY": "Reduce usedQuantity to at most the available quantity.",
    "INVALID_ROTATION": "newPosition must be a whole number of degrees from 0 to 359.",
    "LEDGER_INCONSISTENT": "The usage history needs manual reconciliation.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    403: "You do not have access to this operation.",
    404: "The requested resource was not found. Verify the ID.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)

    if isinstance(exc, MROError):
        error_code = exc.code
    else:
        error_code = exc.__class__.__name__

    request_id = getattr(request.state, "request_id", None)

    if status_code >= 500:
        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=request.url.path,
            error_type=error_code,
            error=str(exc),
            traceback=traceback.format_exc(),
        )
        # Storage internals stay in the logs
        message = INTERNAL_ERROR_MESSAGE
        details = None
    else:
        logger.info(
            "request_rejected",
            request_id=request_id,
            path=request.url.path,
            error_type=error_code,
            status=status_code,
        )
        message = exc.message if isinstance(exc, MROError) else str(exc)
        details = None
        if isinstance(exc, MROError) and exc.details:
            details = {to_camel(key): value for key, value in exc.details.items()}

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        details=details,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", by_alias=True),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(MROError)
    async def domain_exception_handler(request: Request, exc: MROError) -> JSONResponse:
        """Handle domain errors raised by use cases and stores."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json", by_alias=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json", by_alias=True),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 400:
        return "BAD_REQUEST"
    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"
    return "HTTP_ERROR"
