"""Summarization job endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, status

from video_digest.api.dependencies import DispatcherDep
from video_digest.application.dtos.jobs import JobAcceptedResponse, SummarizeRequest
from video_digest.application.services.jobs import JobDispatcher
from video_digest.domain.models.job import PipelineKind

router = APIRouter()

_ACCEPTED_MESSAGE = "Job accepted. Poll the status URL for the result."


def _accept(
    dispatcher: JobDispatcher,
    body: SummarizeRequest | None,
    pipeline: PipelineKind,
) -> JobAcceptedResponse:
    receipt = dispatcher.dispatch(body.source_ref if body else None, pipeline)
    return JobAcceptedResponse(
        message=_ACCEPTED_MESSAGE,
        job_id=receipt.job_id,
        status_url=receipt.status_url,
    )


@router.post(
    "/summarize",
    response_model=JobAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Summarize a video from its audio",
    description=(
        "Extract the audio track, transcribe it and summarize the transcript. "
        "Returns immediately; poll the status URL for the result."
    ),
)
async def summarize_audio(
    dispatcher: DispatcherDep,
    body: Annotated[SummarizeRequest | None, Body()] = None,
) -> JobAcceptedResponse:
    """Start the audio summarization pipeline."""
    return _accept(dispatcher, body, PipelineKind.AUDIO)


@router.post(
    "/summarize-video",
    response_model=JobAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Summarize a video directly",
    description=(
        "Summarize the video with a video-capable model. "
        "Returns immediately; poll the status URL for the result."
    ),
)
async def summarize_video(
    dispatcher: DispatcherDep,
    body: Annotated[SummarizeRequest | None, Body()] = None,
) -> JobAcceptedResponse:
    """Start the direct video summarization pipeline."""
    return _accept(dispatcher, body, PipelineKind.VIDEO)
