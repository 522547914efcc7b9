"""DTOs for text-to-speech."""

from pydantic import BaseModel, Field


class SpeakRequest(BaseModel):
    """Request to convert text to speech."""

    text: str | None = Field(default=None, description="Text to speak")
