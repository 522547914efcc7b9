"""Text-to-speech collaborator."""

from video_digest.commons.telemetry import get_logger, timed
from video_digest.domain.exceptions import MissingTextException
from video_digest.infrastructure.speech.base import SpeechServiceBase


class SpeechService:
    """Converts free text to spoken audio."""

    def __init__(self, synthesizer: SpeechServiceBase) -> None:
        self._synthesizer = synthesizer
        self._logger = get_logger(__name__)

    @timed
    async def synthesize(self, text: str | None) -> bytes:
        """Speak ``text`` and return the encoded audio.

        Raises:
            MissingTextException: If ``text`` is empty or blank.
            SynthesisError: If the provider fails.
        """
        if not text or not text.strip():
            raise MissingTextException()

        speech = await self._synthesizer.synthesize(text)
        self._logger.info(
            "Speech synthesized",
            extra={
                "characters": len(text),
                "bytes": len(speech.audio),
                "voice": speech.voice,
            },
        )
        return speech.audio
