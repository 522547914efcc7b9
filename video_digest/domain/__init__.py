"""Domain layer - business models and logic."""

from video_digest.domain.exceptions import (
    CollaboratorError,
    DomainException,
    EmptySummaryError,
    ExtractionError,
    InvalidSourceReferenceException,
    JobNotFoundException,
    MissingTextException,
    SummarizationError,
    SynthesisError,
    TranscriptionError,
)
from video_digest.domain.models import Job, JobStatus, PipelineKind

__all__ = [
    # Exceptions
    "DomainException",
    "JobNotFoundException",
    "InvalidSourceReferenceException",
    "MissingTextException",
    "CollaboratorError",
    "ExtractionError",
    "TranscriptionError",
    "SummarizationError",
    "EmptySummaryError",
    "SynthesisError",
    # Job
    "Job",
    "JobStatus",
    "PipelineKind",
]
