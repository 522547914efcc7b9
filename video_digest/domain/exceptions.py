"""Domain exceptions for the video digest system."""

from typing import ClassVar


class DomainException(Exception):
    """Base exception for domain errors."""


class JobNotFoundException(DomainException):
    """Raised when a job id is unknown or its record has already expired."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job ID not found: {job_id}")


class InvalidSourceReferenceException(DomainException):
    """Raised when a summarization request carries no usable source reference."""

    def __init__(self, reason: str = "Missing source reference.") -> None:
        self.reason = reason
        super().__init__(reason)


class MissingTextException(DomainException):
    """Raised when a speech request carries no text to synthesize."""

    def __init__(self) -> None:
        super().__init__("Missing text for conversion.")


class CollaboratorError(DomainException):
    """Failure reported by an external collaborator.

    ``status_code`` carries the HTTP-like status the upstream service
    reported, when there was one. ``TRANSIENT_STATUS_CODES`` (service
    unavailable, rate limited, request timeout) are the default retryable
    codes; anything else is fatal.
    """

    TRANSIENT_STATUS_CODES: ClassVar[frozenset[int]] = frozenset({408, 429, 503})

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ExtractionError(CollaboratorError):
    """Raised when no audio stream can be resolved or the upload fails."""


class TranscriptionError(CollaboratorError):
    """Raised when speech recognition fails."""


class SummarizationError(CollaboratorError):
    """Raised when the generative model fails to produce a summary."""


class EmptySummaryError(SummarizationError):
    """Raised when the generative model returns an empty summary."""

    def __init__(self) -> None:
        super().__init__("Summary generation returned empty result.")


class SynthesisError(CollaboratorError):
    """Raised when text-to-speech conversion fails."""
