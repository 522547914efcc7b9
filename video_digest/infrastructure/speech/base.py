"""Abstract base class for text-to-speech services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class SynthesizedSpeech:
    """Encoded audio produced from text."""

    audio: bytes
    content_type: str
    voice: str


class SpeechServiceBase(ABC):
    """Abstract base class for text-to-speech services.

    Implementations should handle:
    - OpenAI TTS
    """

    @abstractmethod
    async def synthesize(self, text: str) -> SynthesizedSpeech:
        """Convert text into encoded audio.

        Args:
            text: Text to speak.

        Returns:
            The encoded audio and its MIME type.

        Raises:
            SynthesisError: If the provider rejects or fails the request.
        """
