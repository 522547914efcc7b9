"""The audio and video summarization pipelines."""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable

from video_digest.application.services.jobs import JobRegistry
from video_digest.application.services.media import (
    AudioStagingService,
    TranscriptService,
)
from video_digest.application.services.retry import (
    RetryPolicy,
    SleepFn,
    execute_with_retry,
)
from video_digest.application.services.summarization import SummarizationService
from video_digest.commons.telemetry import get_logger
from video_digest.domain.exceptions import EmptySummaryError
from video_digest.domain.models.job import JobStatus, PipelineKind


class SummarizationPipelines:
    """Runs the stages of a job in order, reporting progress to the registry.

    Audio pipeline::

        STREAMING     extract audio, upload it to a temporary object
        TRANSCRIBING  speech recognition over the uploaded audio
        SUMMARIZING   summarize the transcript (retried on transient errors)

    The temporary object is deleted on the way out whatever happened.

    Video pipeline::

        SUMMARIZING   summarize the video directly (retried on transient errors)

    Only summarization is retried; extraction and transcription failures
    end the pipeline immediately. Errors propagate unchanged so the first
    cause is what ends up on the job.
    """

    def __init__(
        self,
        registry: JobRegistry,
        staging: AudioStagingService,
        transcripts: TranscriptService,
        summarizer: SummarizationService,
        retry_policy: RetryPolicy | None = None,
        temp_object_prefix: str = "youtube_audio_",
        *,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Initialize the pipelines.

        Args:
            registry: Registry receiving status transitions.
            staging: Audio extraction and temporary storage.
            transcripts: Speech recognition.
            summarizer: Summary generation.
            retry_policy: Policy applied to summarization calls.
            temp_object_prefix: Prefix of temporary audio object names.
            sleep: Awaitable sleep used between retries.
        """
        self._registry = registry
        self._staging = staging
        self._transcripts = transcripts
        self._summarizer = summarizer
        self._retry_policy = retry_policy or RetryPolicy()
        self._temp_object_prefix = temp_object_prefix
        self._sleep = sleep
        self._logger = get_logger(__name__)

    async def run(self, pipeline: PipelineKind, source_ref: str, job_id: str) -> str:
        """Run the pipeline selected by ``pipeline``."""
        if pipeline == PipelineKind.VIDEO:
            return await self.run_video(source_ref, job_id)
        return await self.run_audio(source_ref, job_id)

    def temporary_object_name(self) -> str:
        """Derive a collision-free object name for one pipeline run."""
        return (
            f"{self._temp_object_prefix}{int(time.time() * 1000)}"
            f"-{uuid.uuid4().hex[:8]}"
        )

    async def run_audio(self, source_ref: str, job_id: str) -> str:
        """Extract, transcribe and summarize the source's audio track.

        Returns:
            The summary text.

        Raises:
            ExtractionError: If the audio can't be staged.
            TranscriptionError: If speech recognition fails.
            SummarizationError: If summarization fails fatally or keeps
                failing transiently past the retry budget.
            EmptySummaryError: If the model returned nothing.
        """
        temp_name = self.temporary_object_name()
        self._logger.info(
            "Starting audio pipeline",
            extra={"source_ref": source_ref, "object": temp_name},
        )

        try:
            self._registry.update_status(job_id, JobStatus.STREAMING)
            storage_ref = await self._staging.extract_and_upload(source_ref, temp_name)

            self._registry.update_status(job_id, JobStatus.TRANSCRIBING)
            transcript = await self._transcripts.transcribe(storage_ref)

            self._registry.update_status(job_id, JobStatus.SUMMARIZING)
            return await self._summarize(
                lambda: self._summarizer.summarize_text(transcript),
                "Summarize Text",
            )
        finally:
            try:
                await self._staging.delete_temporary_object(temp_name)
            except Exception as e:
                self._logger.warning(
                    "Temporary object cleanup failed",
                    extra={"object": temp_name, "error": str(e)},
                )

    async def run_video(self, source_ref: str, job_id: str) -> str:
        """Summarize the source with a video-capable model.

        Returns:
            The summary text.

        Raises:
            SummarizationError: If summarization fails fatally or keeps
                failing transiently past the retry budget.
            EmptySummaryError: If the model returned nothing.
        """
        self._logger.info("Starting video pipeline", extra={"source_ref": source_ref})

        self._registry.update_status(job_id, JobStatus.SUMMARIZING)
        return await self._summarize(
            lambda: self._summarizer.summarize_source(source_ref),
            "Summarize Video",
        )

    async def _summarize(
        self,
        operation: Callable[[], Awaitable[str]],
        label: str,
    ) -> str:
        summary = await execute_with_retry(
            operation,
            label,
            self._retry_policy,
            sleep=self._sleep,
        )
        if not summary:
            raise EmptySummaryError()
        return summary
