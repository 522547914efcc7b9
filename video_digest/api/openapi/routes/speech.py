"""Text-to-speech endpoint."""

from typing import Annotated

from fastapi import APIRouter, Body
from fastapi.responses import Response

from video_digest.api.dependencies import SpeechServiceDep
from video_digest.application.dtos.speech import SpeakRequest

router = APIRouter()


@router.post(
    "/speak",
    response_class=Response,
    summary="Convert text to speech",
    description="Synthesize the given text and return MP3 audio.",
    responses={200: {"content": {"audio/mp3": {}}}},
)
async def speak(
    service: SpeechServiceDep,
    body: Annotated[SpeakRequest | None, Body()] = None,
) -> Response:
    """Return the spoken text as an MP3 payload."""
    audio = await service.synthesize(body.text if body else None)
    return Response(content=audio, media_type="audio/mp3")
