"""Source audio downloading services."""

from video_digest.infrastructure.youtube.base import (
    AUDIO_CONTENT_TYPES,
    AudioDownloaderBase,
    AudioSourceInfo,
    DownloadedAudio,
)
from video_digest.infrastructure.youtube.downloader import (
    DownloadError,
    VideoNotFoundError,
    YtDlpDownloader,
)

__all__ = [
    # Base classes
    "AudioDownloaderBase",
    "AudioSourceInfo",
    "DownloadedAudio",
    "AUDIO_CONTENT_TYPES",
    # Implementations
    "YtDlpDownloader",
    # Exceptions
    "DownloadError",
    "VideoNotFoundError",
]
