"""In-memory job registry and the dispatcher that runs pipelines in the background."""

from __future__ import annotations

import asyncio
import random
import time
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from video_digest.commons.telemetry import LogContext, get_logger, job_trace
from video_digest.domain.exceptions import InvalidSourceReferenceException
from video_digest.domain.models.job import Job, JobStatus, PipelineKind

if TYPE_CHECKING:
    from video_digest.application.services.pipelines import SummarizationPipelines

logger = get_logger(__name__)


class JobRegistry:
    """Process-local store of job records keyed by id.

    Every operation is synchronous and O(1), so under asyncio no other task
    can interleave with it. Records are immutable snapshots: updates swap in
    a new ``Job`` rather than mutating the stored one.

    Writes never raise. Unknown ids are ignored, as are transitions that
    would move a job backwards or out of a terminal state.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def create(self, job_id: str, pipeline: PipelineKind = PipelineKind.AUDIO) -> bool:
        """Register a new PENDING job.

        Returns:
            True if registered, False if the id was already taken.
        """
        if job_id in self._jobs:
            logger.warning("Job id already registered", extra={"job_id": job_id})
            return False
        self._jobs[job_id] = Job(id=job_id, pipeline=pipeline)
        return True

    def get(self, job_id: str) -> Job | None:
        """Return the job's current snapshot, or None if unknown."""
        return self._jobs.get(job_id)

    def update_status(self, job_id: str, status: JobStatus) -> None:
        """Move a job to a later non-terminal status, keeping result and error.

        Terminal states are only reachable through ``complete`` and ``fail``.
        """
        job = self._jobs.get(job_id)
        if job is None:
            return
        if status.is_terminal or not job.can_transition_to(status):
            logger.warning(
                "Ignoring invalid job transition",
                extra={
                    "job_id": job_id,
                    "from_status": job.status.value,
                    "to_status": status.value,
                },
            )
            return
        self._jobs[job_id] = job.transition_to(status)

    def complete(self, job_id: str, result: str) -> None:
        """Mark a job COMPLETED with its summary."""
        job = self._terminable(job_id)
        if job is not None:
            self._jobs[job_id] = job.mark_completed(result)

    def fail(self, job_id: str, error: str) -> None:
        """Mark a job FAILED with a human-readable message."""
        job = self._terminable(job_id)
        if job is not None:
            self._jobs[job_id] = job.mark_failed(error)

    def delete(self, job_id: str) -> bool:
        """Remove a job record.

        Returns:
            True if removed, False if it was already gone.
        """
        return self._jobs.pop(job_id, None) is not None

    def status_counts(self) -> dict[str, int]:
        """Number of jobs per status, for health reporting."""
        return dict(Counter(job.status.value for job in self._jobs.values()))

    def _terminable(self, job_id: str) -> Job | None:
        job = self._jobs.get(job_id)
        if job is not None and job.is_terminal:
            logger.warning(
                "Job already settled",
                extra={"job_id": job_id, "status": job.status.value},
            )
            return None
        return job


@dataclass(frozen=True)
class DispatchReceipt:
    """What the caller gets back immediately after dispatching a job."""

    job_id: str
    status_url: str


class JobDispatcher:
    """Starts summarization jobs without blocking and serves their status.

    A dispatched job runs as its own asyncio task. The task records
    COMPLETED or FAILED in the registry however the pipeline ends. Once a
    poll observes a terminal record, the record is deleted after
    ``grace_seconds`` so a racing poll can still read the result.
    """

    def __init__(
        self,
        registry: JobRegistry,
        pipelines: SummarizationPipelines,
        grace_seconds: float = 5.0,
        status_path: str = "/status",
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Job registry shared with the status endpoint.
            pipelines: Pipeline bodies to run.
            grace_seconds: Delay between observing a terminal job and
                deleting its record.
            status_path: Path prefix for the polling URL handed to clients.
        """
        self._registry = registry
        self._pipelines = pipelines
        self._grace_seconds = grace_seconds
        self._status_path = status_path.rstrip("/")
        # Strong references, otherwise the event loop may collect running tasks
        self._tasks: set[asyncio.Task[None]] = set()
        self._expiry: dict[str, asyncio.TimerHandle] = {}

    @property
    def registry(self) -> JobRegistry:
        """The registry this dispatcher writes to."""
        return self._registry

    @property
    def running_jobs(self) -> int:
        """Number of pipelines currently in flight."""
        return len(self._tasks)

    def new_job_id(self) -> str:
        """Mint an id of the form ``job-<epoch millis>-<0..999>``."""
        while True:
            job_id = f"job-{int(time.time() * 1000)}-{random.randrange(1000)}"
            if job_id not in self._registry:
                return job_id

    def dispatch(
        self,
        source_ref: str | None,
        pipeline: PipelineKind,
    ) -> DispatchReceipt:
        """Register a job and start its pipeline in the background.

        Must be called from inside a running event loop. Returns before the
        pipeline executes its first step.

        Args:
            source_ref: Source video URL.
            pipeline: Which pipeline to run.

        Returns:
            Job id and polling URL.

        Raises:
            InvalidSourceReferenceException: If ``source_ref`` is missing or blank.
        """
        if not isinstance(source_ref, str) or not source_ref.strip():
            raise InvalidSourceReferenceException()
        source_ref = source_ref.strip()

        job_id = self.new_job_id()
        self._registry.create(job_id, pipeline)

        task = asyncio.create_task(
            self._run(job_id, source_ref, pipeline), name=f"summarize:{job_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(
            "Job dispatched",
            extra={"job_id": job_id, "pipeline": pipeline.value},
        )
        return DispatchReceipt(
            job_id=job_id,
            status_url=f"{self._status_path}/{job_id}",
        )

    def poll(self, job_id: str) -> Job | None:
        """Return the job's current record, or None if unknown or expired.

        Observing a terminal record schedules its deletion after the grace
        delay. Repeated polls within the window keep the first schedule.
        """
        job = self._registry.get(job_id)
        if job is not None and job.is_terminal:
            self._schedule_expiry(job_id)
        return job

    async def close(self) -> None:
        """Cancel expiry timers and in-flight pipelines."""
        for handle in self._expiry.values():
            handle.cancel()
        self._expiry.clear()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def _run(self, job_id: str, source_ref: str, pipeline: PipelineKind) -> None:
        """Run one pipeline and record how it ended."""
        with (
            LogContext(job_id=job_id, pipeline=pipeline.value),
            job_trace(job_id, pipeline.value, {"source_ref": source_ref}),
        ):
            try:
                summary = await self._pipelines.run(pipeline, source_ref, job_id)
            except asyncio.CancelledError:
                self._registry.fail(job_id, "Job cancelled during shutdown.")
                raise
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.error(
                    "Job failed",
                    extra={"error": message, "error_type": type(e).__name__},
                )
                self._registry.fail(job_id, message)
            else:
                logger.info("Job completed", extra={"summary_chars": len(summary)})
                self._registry.complete(job_id, summary)

    def _schedule_expiry(self, job_id: str) -> None:
        if job_id in self._expiry:
            return
        loop = asyncio.get_running_loop()
        self._expiry[job_id] = loop.call_later(
            self._grace_seconds, self._expire, job_id
        )
        logger.debug(
            "Job expiry scheduled",
            extra={"job_id": job_id, "grace_seconds": self._grace_seconds},
        )

    def _expire(self, job_id: str) -> None:
        self._expiry.pop(job_id, None)
        if self._registry.delete(job_id):
            logger.debug("Job record expired", extra={"job_id": job_id})
