"""DTOs for summarization jobs."""

from typing import Self

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from video_digest.domain.models.job import Job, JobStatus


class SummarizeRequest(BaseModel):
    """Request to summarize a video source.

    A missing reference is not a validation error here; the dispatcher
    rejects it so both summarize endpoints answer it the same way.
    """

    source_ref: str | None = Field(
        default=None,
        validation_alias=AliasChoices("sourceRef", "youtubeUrl", "source_ref"),
        description="URL of the video to summarize",
    )


class JobAcceptedResponse(BaseModel):
    """Response returned as soon as a job is dispatched."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = Field(description="Human-readable acknowledgement")
    job_id: str = Field(description="Identifier to poll")
    status_url: str = Field(description="Relative URL of the status endpoint")


class JobStatusResponse(BaseModel):
    """Current state of a job as seen by a polling client."""

    status: JobStatus = Field(description="Lifecycle status")
    result: str | None = Field(
        default=None,
        description="Summary text once COMPLETED",
    )
    error: str | None = Field(
        default=None,
        description="Failure description once FAILED",
    )

    @classmethod
    def from_job(cls, job: Job) -> Self:
        """Project a job record onto the wire shape."""
        return cls(status=job.status, result=job.result, error=job.error)
