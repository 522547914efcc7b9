"""Abstract base class for transcription services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class TranscriptionWord:
    """A single transcribed word with timing information."""

    word: str
    start_time: float
    end_time: float


@dataclass
class TranscriptionSegment:
    """A recognized span of speech with word-level details."""

    text: str
    start_time: float
    end_time: float
    words: list[TranscriptionWord] = field(default_factory=list)


@dataclass
class TranscriptionResult:
    """Complete transcription result."""

    segments: list[TranscriptionSegment]
    full_text: str
    language: str
    duration_seconds: float


class TranscriptionServiceBase(ABC):
    """Abstract base class for transcription services.

    Implementations should handle:
    - OpenAI Whisper API
    """

    @abstractmethod
    async def transcribe(
        self,
        audio_path: str,
        language_hint: str | None = None,
        word_timestamps: bool = True,
    ) -> TranscriptionResult:
        """Transcribe audio file to text with word-level timestamps.

        Args:
            audio_path: Path to the audio file.
            language_hint: Optional ISO language code hint (e.g., 'en', 'vi').
                None lets the provider detect the language.
            word_timestamps: Whether to include word-level timing.

        Returns:
            Complete transcription with segments and timing info.

        Raises:
            TranscriptionError: If the provider rejects or fails the request.
        """

    @property
    @abstractmethod
    def supports_word_timestamps(self) -> bool:
        """Whether this provider supports word-level timestamps."""
