"""Transcription services."""

from video_digest.infrastructure.transcription.base import (
    TranscriptionResult,
    TranscriptionSegment,
    TranscriptionServiceBase,
    TranscriptionWord,
)
from video_digest.infrastructure.transcription.openai_whisper import (
    OpenAIWhisperTranscription,
)

__all__ = [
    # Base classes
    "TranscriptionServiceBase",
    "TranscriptionResult",
    "TranscriptionSegment",
    "TranscriptionWord",
    # Implementations
    "OpenAIWhisperTranscription",
]
