"""Summarization job domain model."""

from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar, Self

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """Lifecycle status of a summarization job."""

    PENDING = "PENDING"  # Registered, pipeline not started yet
    STREAMING = "STREAMING"  # Extracting audio and uploading it
    TRANSCRIBING = "TRANSCRIBING"  # Speech recognition in progress
    SUMMARIZING = "SUMMARIZING"  # Waiting on the generative model
    COMPLETED = "COMPLETED"  # Summary available
    FAILED = "FAILED"  # Pipeline aborted

    @property
    def is_terminal(self) -> bool:
        """Whether no further transitions can follow this status."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class PipelineKind(str, Enum):
    """Which pipeline a job runs."""

    AUDIO = "audio"  # extract -> transcribe -> summarize transcript
    VIDEO = "video"  # summarize the video source directly


class Job(BaseModel):
    """One tracked invocation of a summarization pipeline.

    Instances are treated as immutable snapshots: every transition returns
    a copy, so a record handed out by the registry never changes under the
    caller.
    """

    # Position of each status along the state machine. Terminal states share
    # the last rank.
    STATUS_RANK: ClassVar[dict[JobStatus, int]] = {
        JobStatus.PENDING: 0,
        JobStatus.STREAMING: 1,
        JobStatus.TRANSCRIBING: 2,
        JobStatus.SUMMARIZING: 3,
        JobStatus.COMPLETED: 4,
        JobStatus.FAILED: 4,
    }

    id: str = Field(description="Opaque job identifier")
    pipeline: PipelineKind = Field(
        default=PipelineKind.AUDIO,
        description="Pipeline this job runs",
    )
    status: JobStatus = Field(
        default=JobStatus.PENDING,
        description="Current lifecycle status",
    )
    result: str | None = Field(
        default=None,
        description="Summary text, only set once COMPLETED",
    )
    error: str | None = Field(
        default=None,
        description="Failure description, only set once FAILED",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the job was registered",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Last transition timestamp",
    )

    @property
    def is_terminal(self) -> bool:
        """Check if the job reached COMPLETED or FAILED."""
        return self.status.is_terminal

    def can_transition_to(self, new_status: JobStatus) -> bool:
        """Check whether moving to ``new_status`` keeps the order monotonic."""
        if self.is_terminal:
            return False
        return self.STATUS_RANK[new_status] > self.STATUS_RANK[self.status]

    def transition_to(self, new_status: JobStatus) -> Self:
        """Create a new instance with updated status.

        Result and error are carried over untouched.

        Args:
            new_status: The new status to transition to.

        Returns:
            A new Job instance with updated status and timestamp.
        """
        return self.model_copy(
            update={"status": new_status, "updated_at": datetime.now(UTC)}
        )

    def mark_completed(self, result: str) -> Self:
        """Create a new instance in COMPLETED state holding ``result``."""
        return self.model_copy(
            update={
                "status": JobStatus.COMPLETED,
                "result": result,
                "error": None,
                "updated_at": datetime.now(UTC),
            }
        )

    def mark_failed(self, error: str) -> Self:
        """Create a new instance in FAILED state holding ``error``."""
        return self.model_copy(
            update={
                "status": JobStatus.FAILED,
                "result": None,
                "error": error,
                "updated_at": datetime.now(UTC),
            }
        )
