"""API middleware."""

from mro.api.middleware.error_handler import ErrorHandlerMiddleware
from mro.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
