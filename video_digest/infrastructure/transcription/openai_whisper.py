"""OpenAI Whisper implementation of transcription service."""

from pathlib import Path
from typing import Any, cast

import openai
from openai import AsyncOpenAI

from video_digest.domain.exceptions import TranscriptionError
from video_digest.infrastructure.errors import upstream_status_code
from video_digest.infrastructure.transcription.base import (
    TranscriptionResult,
    TranscriptionSegment,
    TranscriptionServiceBase,
    TranscriptionWord,
)


def _field(item: Any, name: str, default: Any = None) -> Any:
    """Read a field from a response item that may be a model or a dict."""
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


class OpenAIWhisperTranscription(TranscriptionServiceBase):
    """OpenAI Whisper API implementation of transcription service.

    Uses the OpenAI Whisper API for high-quality transcription with
    word-level timestamps.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize OpenAI Whisper client.

        Args:
            api_key: OpenAI API key.
            model: Whisper model to use.
            base_url: Optional custom API endpoint (for Azure, etc.).
            timeout: Request timeout in seconds.
        """
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self._model = model

    async def transcribe(
        self,
        audio_path: str,
        language_hint: str | None = None,
        word_timestamps: bool = True,
    ) -> TranscriptionResult:
        """Transcribe audio file to text with word-level timestamps."""
        path = Path(audio_path)

        kwargs: dict[str, Any] = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities": ["word", "segment"]
            if word_timestamps
            else ["segment"],
        }
        if language_hint:
            kwargs["language"] = language_hint

        try:
            with path.open("rb") as audio_file:
                # Cast to Any to work around strict overload typing in OpenAI SDK
                create_fn = cast("Any", self._client.audio.transcriptions.create)
                response = await create_fn(file=audio_file, **kwargs)
        except openai.OpenAIError as e:
            raise TranscriptionError(
                f"Transcription failed: {e}", upstream_status_code(e)
            ) from e

        language = _field(response, "language") or language_hint or "en"
        segments = self._build_segments(
            _field(response, "segments") or [],
            (_field(response, "words") or []) if word_timestamps else [],
        )
        duration = _field(response, "duration")
        if duration is None:
            duration = segments[-1].end_time if segments else 0.0

        return TranscriptionResult(
            segments=segments,
            full_text=_field(response, "text", ""),
            language=language,
            duration_seconds=float(duration),
        )

    @staticmethod
    def _build_segments(
        response_segments: list[Any],
        response_words: list[Any],
    ) -> list[TranscriptionSegment]:
        """Attach each timed word to the segment that contains it."""
        segments: list[TranscriptionSegment] = []
        word_idx = 0

        for seg in response_segments:
            seg_start = float(_field(seg, "start", 0))
            seg_end = float(_field(seg, "end", 0))
            segment_words: list[TranscriptionWord] = []

            while word_idx < len(response_words):
                word_data = response_words[word_idx]
                word_start = float(_field(word_data, "start", 0))
                word_end = float(_field(word_data, "end", 0))

                if word_start > seg_end:
                    break
                if word_start >= seg_start and word_end <= seg_end + 0.1:
                    segment_words.append(
                        TranscriptionWord(
                            word=_field(word_data, "word", "").strip(),
                            start_time=word_start,
                            end_time=word_end,
                        )
                    )
                word_idx += 1

            segments.append(
                TranscriptionSegment(
                    text=_field(seg, "text", "").strip(),
                    start_time=seg_start,
                    end_time=seg_end,
                    words=segment_words,
                )
            )

        return segments

    @property
    def supports_word_timestamps(self) -> bool:
        """Whether this provider supports word-level timestamps."""
        return True
