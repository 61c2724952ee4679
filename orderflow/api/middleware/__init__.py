"""API middleware."""

from orderflow.api.middleware.error_handler import ErrorHandlerMiddleware
from orderflow.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
