"""Error handling middleware and exception handlers."""

from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from video_digest.commons.telemetry.logger import get_logger
from video_digest.domain.exceptions import (
    CollaboratorError,
    DomainException,
    InvalidSourceReferenceException,
    JobNotFoundException,
    MissingTextException,
    SynthesisError,
)

logger = get_logger(__name__)


def _build_error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build standardized error response.

    Args:
        request: HTTP request.
        code: Error code.
        message: Error message.
        status_code: HTTP status code.
        details: Additional details.

    Returns:
        JSON error response.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
            }
        },
    )


def _handle_exception(  # noqa: PLR0911
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle exception and return appropriate error response.

    Args:
        request: HTTP request.
        exc: Exception to handle.

    Returns:
        JSON error response.
    """
    if isinstance(exc, InvalidSourceReferenceException):
        logger.warning(f"Invalid source reference: {exc}")
        return _build_error_response(
            request=request,
            code="INVALID_SOURCE_REFERENCE",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, MissingTextException):
        logger.warning(f"Missing text: {exc}")
        return _build_error_response(
            request=request,
            code="MISSING_TEXT",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, JobNotFoundException):
        logger.info(f"Job not found: {exc}")
        return _build_error_response(
            request=request,
            code="JOB_NOT_FOUND",
            message=str(exc),
            status_code=status.HTTP_404_NOT_FOUND,
            details={"job_id": exc.job_id},
        )

    if isinstance(exc, SynthesisError):
        logger.error(f"Speech synthesis failed: {exc}")
        return _build_error_response(
            request=request,
            code="SYNTHESIS_ERROR",
            message="Could not generate speech from text.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"upstream_status": exc.status_code},
        )

    if isinstance(exc, CollaboratorError):
        logger.error(f"Upstream service error: {exc}")
        return _build_error_response(
            request=request,
            code="UPSTREAM_ERROR",
            message=str(exc),
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"upstream_status": exc.status_code},
        )

    if isinstance(exc, DomainException):
        logger.warning(f"Domain error: {exc}")
        return _build_error_response(
            request=request,
            code="DOMAIN_ERROR",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    # Catch-all for unexpected errors
    logger.exception(f"Unexpected error: {exc}")
    return _build_error_response(
        request=request,
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Report malformed request bodies as 400 in the standard envelope."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    logger.warning("Request validation failed", extra={"errors": len(errors)})
    return _build_error_response(
        request=request,
        code="VALIDATION_ERROR",
        message="Invalid request body.",
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"errors": jsonable_encoder(errors)},
    )


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Middleware to catch and format all exceptions.

    Args:
        request: HTTP request.
        call_next: Next handler in chain.

    Returns:
        HTTP response.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)
