"""API layer - REST endpoints."""

from video_digest.api.main import app, create_app

__all__ = [
    "app",
    "create_app",
]
