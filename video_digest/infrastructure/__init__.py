"""Infrastructure layer - external service implementations."""

from video_digest.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)
from video_digest.infrastructure.llm import (
    AnthropicLLMService,
    GeminiLLMService,
    LLMResponse,
    LLMServiceBase,
    LLMUsage,
    Message,
    MessageRole,
    OpenAILLMService,
)
from video_digest.infrastructure.speech import (
    OpenAITextToSpeech,
    SpeechServiceBase,
    SynthesizedSpeech,
)
from video_digest.infrastructure.transcription import (
    OpenAIWhisperTranscription,
    TranscriptionResult,
    TranscriptionSegment,
    TranscriptionServiceBase,
    TranscriptionWord,
)
from video_digest.infrastructure.youtube import (
    AudioDownloaderBase,
    AudioSourceInfo,
    DownloadedAudio,
    DownloadError,
    VideoNotFoundError,
    YtDlpDownloader,
)

__all__ = [
    # Factory
    "InfrastructureFactory",
    "get_factory",
    "reset_factory",
    # Transcription
    "TranscriptionServiceBase",
    "TranscriptionResult",
    "TranscriptionSegment",
    "TranscriptionWord",
    "OpenAIWhisperTranscription",
    # LLM
    "LLMServiceBase",
    "LLMResponse",
    "LLMUsage",
    "Message",
    "MessageRole",
    "AnthropicLLMService",
    "GeminiLLMService",
    "OpenAILLMService",
    # Speech
    "SpeechServiceBase",
    "SynthesizedSpeech",
    "OpenAITextToSpeech",
    # Source audio
    "AudioDownloaderBase",
    "AudioSourceInfo",
    "DownloadedAudio",
    "YtDlpDownloader",
    "DownloadError",
    "VideoNotFoundError",
]
