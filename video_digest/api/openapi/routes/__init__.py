"""API route handlers."""

from video_digest.api.openapi.routes import health, speech, status, summarize

__all__ = [
    "health",
    "speech",
    "status",
    "summarize",
]
