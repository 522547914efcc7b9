"""Text-to-speech services."""

from video_digest.infrastructure.speech.base import SpeechServiceBase, SynthesizedSpeech
from video_digest.infrastructure.speech.openai_tts import OpenAITextToSpeech

__all__ = [
    # Base classes
    "SpeechServiceBase",
    "SynthesizedSpeech",
    # Implementations
    "OpenAITextToSpeech",
]
