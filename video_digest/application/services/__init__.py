"""Application services for summarization jobs and speech."""

from video_digest.application.services.jobs import (
    DispatchReceipt,
    JobDispatcher,
    JobRegistry,
)
from video_digest.application.services.media import (
    AudioStagingService,
    TranscriptService,
    format_transcript,
)
from video_digest.application.services.pipelines import SummarizationPipelines
from video_digest.application.services.retry import RetryPolicy, execute_with_retry
from video_digest.application.services.speech import SpeechService
from video_digest.application.services.summarization import SummarizationService

__all__ = [
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
    "format_transcript",
]
