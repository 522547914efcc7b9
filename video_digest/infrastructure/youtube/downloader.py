"""yt-dlp implementation of the audio downloader."""

import asyncio
from pathlib import Path
from typing import Any

import yt_dlp

from video_digest.infrastructure.youtube.base import (
    AudioDownloaderBase,
    AudioSourceInfo,
    DownloadedAudio,
)


class VideoNotFoundError(Exception):
    """Raised when a video is not found."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Video not found: {url}")


class DownloadError(Exception):
    """Raised when download fails."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Download failed for {url}: {reason}")


class YtDlpDownloader(AudioDownloaderBase):
    """yt-dlp implementation of the audio downloader."""

    _UNAVAILABLE_MARKERS = ("Video unavailable", "Private video", "not available")

    def __init__(
        self,
        cookies_file: Path | None = None,
        cookies_from_browser: str | None = None,
        proxy: str | None = None,
        rate_limit: str | None = None,
        audio_format: str = "bestaudio/best",
        socket_timeout: int = 30,
    ) -> None:
        """Initialize yt-dlp downloader.

        Args:
            cookies_file: Path to cookies file for authenticated downloads.
            cookies_from_browser: Browser name to extract cookies from
                (e.g., "chrome", "firefox", "edge", "safari", "opera", "brave").
            proxy: Proxy URL.
            rate_limit: Rate limit (e.g., "50K", "1M").
            audio_format: yt-dlp format selector for the audio stream.
            socket_timeout: Network timeout in seconds.
        """
        self._cookies_file = cookies_file
        self._cookies_from_browser = cookies_from_browser
        self._proxy = proxy
        self._rate_limit = rate_limit
        self._audio_format = audio_format
        self._socket_timeout = socket_timeout

    def _get_base_opts(self) -> dict[str, Any]:
        """Get base yt-dlp options."""
        opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "format": self._audio_format,
            "socket_timeout": self._socket_timeout,
        }

        # Cookie authentication (file takes precedence over browser)
        if self._cookies_file:
            opts["cookiefile"] = str(self._cookies_file)
        elif self._cookies_from_browser:
            opts["cookiesfrombrowser"] = (self._cookies_from_browser,)
        if self._proxy:
            opts["proxy"] = self._proxy
        if self._rate_limit:
            opts["ratelimit"] = self._rate_limit

        return opts

    async def download_audio(
        self,
        url: str,
        output_dir: Path,
        filename_stem: str,
    ) -> DownloadedAudio:
        """Download the best audio-only stream of ``url`` as-is."""
        loop = asyncio.get_running_loop()
        output_dir.mkdir(parents=True, exist_ok=True)

        opts = self._get_base_opts()
        opts["outtmpl"] = str(output_dir / f"{filename_stem}.%(ext)s")

        def _download() -> dict[str, Any]:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(url, download=True)
                if info is None:
                    raise VideoNotFoundError(url)
                return dict(info)

        info = await self._run(url, loop.run_in_executor(None, _download))
        audio = self._to_audio_info(info)

        path = output_dir / f"{filename_stem}.{audio.ext}"
        if not path.exists():
            raise DownloadError(url, "yt-dlp reported success but wrote no file")

        return DownloadedAudio(path=path, info=audio)

    async def _run(
        self,
        url: str,
        pending: "asyncio.Future[dict[str, Any]]",
    ) -> dict[str, Any]:
        """Await an executor job, translating yt-dlp errors."""
        try:
            return await pending
        except yt_dlp.utils.DownloadError as e:
            if any(marker in str(e) for marker in self._UNAVAILABLE_MARKERS):
                raise VideoNotFoundError(url) from e
            raise DownloadError(url, str(e)) from e

    @staticmethod
    def _to_audio_info(info: dict[str, Any]) -> AudioSourceInfo:
        """Pick the fields the pipeline needs out of yt-dlp's info dict."""
        return AudioSourceInfo(
            source_id=info.get("id", ""),
            title=info.get("title", ""),
            duration_seconds=int(info.get("duration") or 0),
            ext=info.get("ext") or "m4a",
            abr=info.get("abr"),
        )
