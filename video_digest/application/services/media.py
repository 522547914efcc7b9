"""Audio staging and transcription collaborators for the audio pipeline."""

import tempfile
from pathlib import Path

from video_digest.commons.infrastructure.blob import (
    BlobNotFoundError,
    BlobStorageBase,
)
from video_digest.commons.telemetry import get_logger, timed
from video_digest.domain.exceptions import ExtractionError, TranscriptionError
from video_digest.infrastructure.transcription.base import (
    TranscriptionResult,
    TranscriptionServiceBase,
)
from video_digest.infrastructure.youtube.base import AudioDownloaderBase
from video_digest.infrastructure.youtube.downloader import (
    DownloadError,
    VideoNotFoundError,
)

# Reverse of the downloader's extension -> MIME table, for naming local copies.
_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/flac": "flac",
}


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``[mm:ss]``, truncating fractions."""
    total = int(seconds)
    return f"[{total // 60:02d}:{total % 60:02d}]"


def format_transcript(result: TranscriptionResult) -> str:
    """Render a transcription as timestamped text for the summarizer.

    Each segment becomes one line. Words carry their start time
    (``[mm:ss] word``); segments without word timings fall back to their
    plain text.
    """
    lines: list[str] = []
    for segment in result.segments:
        if segment.words:
            lines.append(
                " ".join(
                    f"{format_timestamp(w.start_time)} {w.word}" for w in segment.words
                )
            )
        elif segment.text:
            lines.append(segment.text)

    if not lines and result.full_text:
        return result.full_text.strip()
    return "\n".join(lines).strip()


class AudioStagingService:
    """Resolves a source's audio stream and parks it in object storage."""

    def __init__(
        self,
        downloader: AudioDownloaderBase,
        blob_storage: BlobStorageBase,
        bucket: str,
    ) -> None:
        """Initialize the staging service.

        Args:
            downloader: Source audio downloader.
            blob_storage: Object storage for the staged audio.
            bucket: Bucket holding temporary audio objects.
        """
        self._downloader = downloader
        self._blob = blob_storage
        self._bucket = bucket
        self._logger = get_logger(__name__)

    @timed
    async def extract_and_upload(self, source_ref: str, destination_name: str) -> str:
        """Download the source's audio and upload it under ``destination_name``.

        The audio is stored in whatever container the source serves; the
        object's content type records which one.

        Args:
            source_ref: Source video URL.
            destination_name: Object name inside the audio bucket.

        Returns:
            Storage reference (``s3://bucket/object``) of the uploaded audio.

        Raises:
            ExtractionError: If no audio stream resolves or the upload fails.
        """
        with tempfile.TemporaryDirectory(prefix="video_digest_") as tmp_dir:
            try:
                audio = await self._downloader.download_audio(
                    source_ref, Path(tmp_dir), "audio"
                )
            except (VideoNotFoundError, DownloadError) as e:
                raise ExtractionError(
                    f"Could not resolve an audio stream for {source_ref}: {e}"
                ) from e

            self._logger.info(
                "Audio downloaded",
                extra={
                    "source_id": audio.info.source_id,
                    "duration_seconds": audio.info.duration_seconds,
                    "ext": audio.info.ext,
                },
            )

            try:
                await self._blob.upload_file(
                    self._bucket,
                    destination_name,
                    audio.path,
                    content_type=audio.content_type,
                )
            except Exception as e:
                raise ExtractionError(f"Failed to upload audio: {e}") from e

        storage_ref = self._blob.build_uri(self._bucket, destination_name)
        self._logger.info("Audio staged", extra={"storage_ref": storage_ref})
        return storage_ref

    async def delete_temporary_object(self, name: str) -> None:
        """Best-effort removal of a staged audio object.

        Never raises; failures are logged so they cannot mask the outcome of
        the pipeline that owns the object.
        """
        try:
            deleted = await self._blob.delete(self._bucket, name)
        except Exception as e:
            self._logger.warning(
                "Could not delete temporary audio object",
                extra={"bucket": self._bucket, "object": name, "error": str(e)},
            )
            return

        if deleted:
            self._logger.info("Temporary audio object deleted", extra={"object": name})
        else:
            self._logger.debug(
                "Temporary audio object was never created", extra={"object": name}
            )


class TranscriptService:
    """Turns a staged audio object into timestamped transcript text."""

    def __init__(
        self,
        transcriber: TranscriptionServiceBase,
        blob_storage: BlobStorageBase,
        language: str | None = None,
        word_timestamps: bool = True,
    ) -> None:
        """Initialize the transcript service.

        Args:
            transcriber: Speech recognition provider.
            blob_storage: Object storage holding the staged audio.
            language: Optional ISO language hint.
            word_timestamps: Request per-word timings.
        """
        self._transcriber = transcriber
        self._blob = blob_storage
        self._language = language
        self._word_timestamps = word_timestamps
        self._logger = get_logger(__name__)

    @timed
    async def transcribe(self, storage_ref: str) -> str:
        """Transcribe the audio object named by ``storage_ref``.

        Raises:
            TranscriptionError: If the object can't be fetched or recognition fails.
        """
        try:
            bucket, path = self._blob.parse_uri(storage_ref)
            metadata = await self._blob.get_metadata(bucket, path)
        except (ValueError, BlobNotFoundError) as e:
            raise TranscriptionError(f"Audio object unavailable: {e}") from e

        ext = _EXTENSIONS.get(metadata.content_type, "mp3")

        with tempfile.TemporaryDirectory(prefix="video_digest_") as tmp_dir:
            local_path = Path(tmp_dir) / f"audio.{ext}"
            try:
                await self._blob.download_to_file(bucket, path, local_path)
            except Exception as e:
                raise TranscriptionError(f"Failed to fetch audio: {e}") from e

            result = await self._transcriber.transcribe(
                str(local_path),
                language_hint=self._language,
                word_timestamps=self._word_timestamps,
            )

        transcript = format_transcript(result)
        self._logger.info(
            "Transcription complete",
            extra={
                "language": result.language,
                "duration_seconds": result.duration_seconds,
                "characters": len(transcript),
                "preview": transcript[:200],
            },
        )
        return transcript
