"""API middleware components."""

from video_digest.api.middleware.error_handler import (
    error_handler_middleware,
    validation_exception_handler,
)
from video_digest.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
    "error_handler_middleware",
    "validation_exception_handler",
]
