"""Data Transfer Objects for application layer."""

from video_digest.application.dtos.jobs import (
    JobAcceptedResponse,
    JobStatusResponse,
    SummarizeRequest,
)
from video_digest.application.dtos.speech import SpeakRequest

__all__ = [
    # Job DTOs
    "SummarizeRequest",
    "JobAcceptedResponse",
    "JobStatusResponse",
    # Speech DTOs
    "SpeakRequest",
]
