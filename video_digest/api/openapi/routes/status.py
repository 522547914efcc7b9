"""Job status endpoint."""

from fastapi import APIRouter

from video_digest.api.dependencies import DispatcherDep
from video_digest.application.dtos.jobs import JobStatusResponse
from video_digest.domain.exceptions import JobNotFoundException

router = APIRouter()


@router.get(
    "/status/{job_id}",
    response_model=JobStatusResponse,
    summary="Get job status",
    description=(
        "Current status of a summarization job. Finished jobs stay readable "
        "for a short grace period after they are first observed."
    ),
)
async def get_job_status(
    job_id: str,
    dispatcher: DispatcherDep,
) -> JobStatusResponse:
    """Poll a job's status, result and error."""
    job = dispatcher.poll(job_id)
    if job is None:
        raise JobNotFoundException(job_id)
    return JobStatusResponse.from_job(job)
