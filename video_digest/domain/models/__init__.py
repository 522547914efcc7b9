"""Domain models."""

from video_digest.domain.models.job import Job, JobStatus, PipelineKind

__all__ = [
    "Job",
    "JobStatus",
    "PipelineKind",
]
