"""Application layer - use cases and orchestration.

This layer contains:
- Services: Job registry, dispatcher, pipelines and their collaborators
- DTOs: Data transfer objects for API boundaries
"""

from video_digest.application.dtos import (
    JobAcceptedResponse,
    JobStatusResponse,
    SpeakRequest,
    SummarizeRequest,
)
from video_digest.application.services import (
    AudioStagingService,
    DispatchReceipt,
    JobDispatcher,
    JobRegistry,
    RetryPolicy,
    SpeechService,
    SummarizationPipelines,
    SummarizationService,
    TranscriptService,
    execute_with_retry,
)

__all__ = [
    # DTOs
    "SummarizeRequest",
    "JobAcceptedResponse",
    "JobStatusResponse",
    "SpeakRequest",
    # Services
    "AudioStagingService",
    "DispatchReceipt",
    "JobDispatcher",
    "JobRegistry",
    "RetryPolicy",
    "SpeechService",
    "SummarizationPipelines",
    "SummarizationService",
    "TranscriptService",
    "execute_with_retry",
]
