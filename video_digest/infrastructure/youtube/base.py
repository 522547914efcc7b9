"""Abstract base class for source audio downloaders."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class AudioSourceInfo:
    """What the resolver learned about a source's audio stream."""

    source_id: str
    title: str
    duration_seconds: int
    ext: str
    abr: float | None = None


@dataclass
class DownloadedAudio:
    """An audio stream saved to the local filesystem."""

    path: Path
    info: AudioSourceInfo

    @property
    def content_type(self) -> str:
        """MIME type derived from the container extension."""
        return AUDIO_CONTENT_TYPES.get(self.info.ext, "application/octet-stream")


AUDIO_CONTENT_TYPES: dict[str, str] = {
    "mp3": "audio/mpeg",
    "m4a": "audio/mp4",
    "mp4": "audio/mp4",
    "webm": "audio/webm",
    "opus": "audio/ogg",
    "ogg": "audio/ogg",
    "wav": "audio/wav",
    "flac": "audio/flac",
}


class AudioDownloaderBase(ABC):
    """Abstract base class for resolving and fetching a source's audio.

    Implementations should handle:
    - yt-dlp (YouTube and the other sites it supports)
    """

    @abstractmethod
    async def download_audio(
        self,
        url: str,
        output_dir: Path,
        filename_stem: str,
    ) -> DownloadedAudio:
        """Download the best audio-only stream of ``url`` as-is.

        No transcoding happens: the file keeps the container the source
        serves (m4a, webm, ...).

        Args:
            url: Source video URL.
            output_dir: Directory to save the file into.
            filename_stem: File name without extension.

        Returns:
            The downloaded file and stream info.

        Raises:
            VideoNotFoundError: If the source doesn't exist.
            DownloadError: If no audio stream can be fetched.
        """
