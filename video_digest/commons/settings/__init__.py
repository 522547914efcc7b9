"""Settings management module."""

from video_digest.commons.settings.loader import (
    SettingsLoader,
    get_settings,
    reset_settings,
)
from video_digest.commons.settings.models import (
    AppSettings,
    BlobStorageSettings,
    BucketSettings,
    JobSettings,
    LangfuseSettings,
    LLMSettings,
    RetrySettings,
    ServerSettings,
    Settings,
    SpeechSettings,
    SummarizationSettings,
    TelemetrySettings,
    TranscriptionSettings,
    VideoModelSettings,
    YouTubeSettings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "get_settings",
    "reset_settings",
    # Main settings
    "Settings",
    "AppSettings",
    "ServerSettings",
    # Storage & sources
    "BlobStorageSettings",
    "BucketSettings",
    "YouTubeSettings",
    # AI services
    "TranscriptionSettings",
    "LLMSettings",
    "SummarizationSettings",
    "VideoModelSettings",
    "SpeechSettings",
    # Orchestration
    "RetrySettings",
    "JobSettings",
    # Telemetry
    "TelemetrySettings",
    "LangfuseSettings",
]
