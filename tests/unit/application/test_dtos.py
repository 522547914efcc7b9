"""Unit tests for application DTOs."""

from video_digest.application.dtos.jobs import (
    JobAcceptedResponse,
    JobStatusResponse,
    SummarizeRequest,
)
from video_digest.application.dtos.speech import SpeakRequest
from video_digest.domain.models.job import Job, JobStatus


class TestSummarizeRequest:
    """Tests for SummarizeRequest."""

    def test_accepts_source_ref(self):
        request = SummarizeRequest.model_validate({"sourceRef": "https://a.b/c"})
        assert request.source_ref == "https://a.b/c"

    def test_accepts_youtube_url(self):
        request = SummarizeRequest.model_validate({"youtubeUrl": "https://a.b/c"})
        assert request.source_ref == "https://a.b/c"

    def test_missing_reference_is_none(self):
        assert SummarizeRequest.model_validate({}).source_ref is None


class TestJobAcceptedResponse:
    """Tests for JobAcceptedResponse."""

    def test_serializes_camel_case(self):
        response = JobAcceptedResponse(
            message="Job accepted.",
            job_id="job-1-1",
            status_url="/status/job-1-1",
        )
        assert response.model_dump(by_alias=True) == {
            "message": "Job accepted.",
            "jobId": "job-1-1",
            "statusUrl": "/status/job-1-1",
        }


class TestJobStatusResponse:
    """Tests for JobStatusResponse."""

    def test_from_pending_job(self):
        response = JobStatusResponse.from_job(Job(id="job-1-1"))
        assert response.status == JobStatus.PENDING
        assert response.result is None
        assert response.error is None

    def test_from_completed_job(self):
        job = Job(id="job-1-1").mark_completed("Summary")
        assert JobStatusResponse.from_job(job).model_dump(mode="json") == {
            "status": "COMPLETED",
            "result": "Summary",
            "error": None,
        }

    def test_from_failed_job(self):
        job = Job(id="job-1-1").mark_failed("boom")
        response = JobStatusResponse.from_job(job)
        assert response.status == JobStatus.FAILED
        assert response.error == "boom"


class TestSpeakRequest:
    """Tests for SpeakRequest."""

    def test_text_optional(self):
        assert SpeakRequest.model_validate({}).text is None
        assert SpeakRequest(text="Hi").text == "Hi"
