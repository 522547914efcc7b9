"""Infrastructure factory for creating service instances from configuration."""

import logging
from pathlib import Path
from typing import Any, cast

from video_digest.commons.infrastructure.blob import BlobStorageBase, MinioBlobStorage
from video_digest.commons.settings.models import Settings
from video_digest.infrastructure.llm import (
    AnthropicLLMService,
    GeminiLLMService,
    LLMServiceBase,
    OpenAILLMService,
)
from video_digest.infrastructure.speech import OpenAITextToSpeech, SpeechServiceBase
from video_digest.infrastructure.transcription import (
    OpenAIWhisperTranscription,
    TranscriptionServiceBase,
)
from video_digest.infrastructure.youtube import AudioDownloaderBase, YtDlpDownloader

logger = logging.getLogger(__name__)


class InfrastructureFactory:
    """Factory for creating infrastructure service instances.

    Creates concrete implementations based on configuration settings and
    caches one instance per service.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize factory with settings.

        Args:
            settings: Application settings.
        """
        self._settings = settings
        self._instances: dict[str, Any] = {}

    def get_blob_storage(self) -> BlobStorageBase:
        """Get blob storage instance.

        Returns:
            Configured blob storage provider.
        """
        if "blob_storage" not in self._instances:
            blob_settings = self._settings.blob_storage
            self._instances["blob_storage"] = MinioBlobStorage(
                endpoint=blob_settings.endpoint,
                access_key=blob_settings.access_key,
                secret_key=blob_settings.secret_key,
                secure=blob_settings.use_ssl,
                region=blob_settings.region,
            )
        return cast("BlobStorageBase", self._instances["blob_storage"])

    def get_youtube_downloader(self) -> AudioDownloaderBase:
        """Get source audio downloader instance.

        Returns:
            Configured yt-dlp downloader.
        """
        if "youtube_downloader" not in self._instances:
            yt_settings = self._settings.youtube
            cookies_file = (
                Path(yt_settings.cookies_file) if yt_settings.cookies_file else None
            )
            self._instances["youtube_downloader"] = YtDlpDownloader(
                cookies_file=cookies_file,
                cookies_from_browser=yt_settings.cookies_from_browser,
                proxy=yt_settings.proxy,
                rate_limit=yt_settings.rate_limit,
                audio_format=yt_settings.audio_format,
                socket_timeout=yt_settings.socket_timeout_seconds,
            )
        return cast("AudioDownloaderBase", self._instances["youtube_downloader"])

    def get_transcription_service(self) -> TranscriptionServiceBase:
        """Get transcription service instance.

        Returns:
            Configured transcription service.
        """
        if "transcription" not in self._instances:
            trans_settings = self._settings.transcription
            self._instances["transcription"] = OpenAIWhisperTranscription(
                api_key=trans_settings.api_key,
                model=trans_settings.model,
                base_url=trans_settings.endpoint,
                timeout=trans_settings.timeout_seconds,
            )
        return cast("TranscriptionServiceBase", self._instances["transcription"])

    def get_llm_service(self) -> LLMServiceBase:
        """Get the LLM service that summarizes transcripts.

        Returns:
            Configured LLM service.

        Raises:
            ValueError: If provider is not supported.
        """
        if "llm" not in self._instances:
            llm_settings = self._settings.llm
            provider = llm_settings.provider

            if provider == "anthropic":
                self._instances["llm"] = AnthropicLLMService(
                    api_key=llm_settings.api_key,
                    model=llm_settings.model,
                    base_url=llm_settings.endpoint,
                    timeout=llm_settings.timeout_seconds,
                )
            elif provider in ("openai", "azure_openai"):
                self._instances["llm"] = OpenAILLMService(
                    api_key=llm_settings.api_key,
                    model=llm_settings.model,
                    base_url=llm_settings.endpoint,
                    timeout=llm_settings.timeout_seconds,
                    azure=provider == "azure_openai",
                )
            elif provider == "google":
                self._instances["llm"] = GeminiLLMService(
                    api_key=llm_settings.api_key,
                    model=llm_settings.model,
                )
            else:
                raise ValueError(f"Unsupported LLM provider: {provider}")

        return cast("LLMServiceBase", self._instances["llm"])

    def get_video_llm_service(self) -> LLMServiceBase:
        """Get the video-capable LLM service that summarizes sources directly.

        Returns:
            Configured video LLM service.

        Raises:
            ValueError: If provider is not supported.
        """
        if "video_llm" not in self._instances:
            video_settings = self._settings.summarization.video
            if video_settings.provider != "google":
                raise ValueError(
                    f"Unsupported video model provider: {video_settings.provider}"
                )
            self._instances["video_llm"] = GeminiLLMService(
                api_key=video_settings.api_key,
                model=video_settings.model,
            )
        return cast("LLMServiceBase", self._instances["video_llm"])

    def get_speech_service(self) -> SpeechServiceBase:
        """Get text-to-speech service instance.

        Returns:
            Configured speech service.
        """
        if "speech" not in self._instances:
            speech_settings = self._settings.speech
            self._instances["speech"] = OpenAITextToSpeech(
                api_key=speech_settings.api_key,
                model=speech_settings.model,
                voice=speech_settings.voice,
                speed=speech_settings.speed,
                response_format=speech_settings.response_format,
                base_url=speech_settings.endpoint,
            )
        return cast("SpeechServiceBase", self._instances["speech"])

    async def close_all(self) -> None:
        """Close all service connections."""
        for name, instance in self._instances.items():
            if not hasattr(instance, "close"):
                continue
            try:
                close_result = instance.close()
                if hasattr(close_result, "__await__"):
                    await close_result
            except Exception as e:
                logger.warning(
                    "Failed to close service", extra={"service": name, "error": str(e)}
                )

        self._instances.clear()


class _FactoryHolder:
    """Holder for the factory singleton to avoid global statements."""

    instance: InfrastructureFactory | None = None


def get_factory(settings: Settings | None = None) -> InfrastructureFactory:
    """Get or create the infrastructure factory singleton.

    Args:
        settings: Settings to use. Required on first call.

    Returns:
        Infrastructure factory instance.

    Raises:
        ValueError: If settings not provided on first call.
    """
    if _FactoryHolder.instance is None:
        if settings is None:
            raise ValueError("Settings required to initialize factory")
        _FactoryHolder.instance = InfrastructureFactory(settings)

    return _FactoryHolder.instance


def reset_factory() -> None:
    """Reset the factory singleton (for testing)."""
    _FactoryHolder.instance = None
