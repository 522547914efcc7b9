"""OpenAI implementation of text-to-speech."""

from typing import Any, cast

import openai
from openai import AsyncOpenAI

from video_digest.domain.exceptions import SynthesisError
from video_digest.infrastructure.errors import upstream_status_code
from video_digest.infrastructure.speech.base import SpeechServiceBase, SynthesizedSpeech

_CONTENT_TYPES = {
    "mp3": "audio/mp3",
    "opus": "audio/opus",
    "aac": "audio/aac",
    "flac": "audio/flac",
    "wav": "audio/wav",
}


class OpenAITextToSpeech(SpeechServiceBase):
    """OpenAI speech API implementation of text-to-speech."""

    def __init__(
        self,
        api_key: str,
        model: str = "tts-1",
        voice: str = "alloy",
        speed: float = 1.25,
        response_format: str = "mp3",
        base_url: str | None = None,
    ) -> None:
        """Initialize OpenAI TTS client.

        Args:
            api_key: OpenAI API key.
            model: TTS model to use.
            voice: Voice preset.
            speed: Speaking rate, 1.0 being normal.
            response_format: Audio encoding.
            base_url: Optional custom API endpoint.
        """
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._voice = voice
        self._speed = speed
        self._response_format = response_format

    async def synthesize(self, text: str) -> SynthesizedSpeech:
        """Convert text into encoded audio."""
        try:
            create_fn = cast("Any", self._client.audio.speech.create)
            response = await create_fn(
                model=self._model,
                voice=self._voice,
                input=text,
                speed=self._speed,
                response_format=self._response_format,
            )
            audio = response.content
        except openai.OpenAIError as e:
            raise SynthesisError(
                f"Speech synthesis failed: {e}", upstream_status_code(e)
            ) from e

        return SynthesizedSpeech(
            audio=audio,
            content_type=_CONTENT_TYPES.get(
                self._response_format, "application/octet-stream"
            ),
            voice=self._voice,
        )
