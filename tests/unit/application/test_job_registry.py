"""Unit tests for JobRegistry."""

import pytest

from video_digest.application.services.jobs import JobRegistry
from video_digest.domain.models.job import JobStatus, PipelineKind


@pytest.fixture
def registry():
    """Registry holding a single PENDING job."""
    registry = JobRegistry()
    registry.create("job-1-1")
    return registry


class TestCreateAndGet:
    """Tests for registering and reading jobs."""

    def test_create_registers_pending_job(self, registry):
        job = registry.get("job-1-1")
        assert job is not None
        assert job.status == JobStatus.PENDING
        assert job.pipeline == PipelineKind.AUDIO
        assert "job-1-1" in registry
        assert len(registry) == 1

    def test_create_records_pipeline(self):
        registry = JobRegistry()
        registry.create("job-2-2", PipelineKind.VIDEO)
        assert registry.get("job-2-2").pipeline == PipelineKind.VIDEO

    def test_duplicate_id_rejected(self, registry):
        registry.complete("job-1-1", "done")
        assert registry.create("job-1-1") is False
        # The existing record is untouched
        assert registry.get("job-1-1").status == JobStatus.COMPLETED

    def test_get_unknown(self, registry):
        assert registry.get("job-missing") is None

    def test_snapshots_do_not_change(self, registry):
        before = registry.get("job-1-1")
        registry.update_status("job-1-1", JobStatus.STREAMING)
        assert before.status == JobStatus.PENDING
        assert registry.get("job-1-1").status == JobStatus.STREAMING


class TestTransitions:
    """Tests for status updates."""

    def test_forward_progress(self, registry):
        for status in (
            JobStatus.STREAMING,
            JobStatus.TRANSCRIBING,
            JobStatus.SUMMARIZING,
        ):
            registry.update_status("job-1-1", status)
            assert registry.get("job-1-1").status == status

    def test_backward_move_ignored(self, registry):
        registry.update_status("job-1-1", JobStatus.TRANSCRIBING)
        registry.update_status("job-1-1", JobStatus.STREAMING)
        assert registry.get("job-1-1").status == JobStatus.TRANSCRIBING

    def test_terminal_status_not_reachable_via_update(self, registry):
        registry.update_status("job-1-1", JobStatus.COMPLETED)
        assert registry.get("job-1-1").status == JobStatus.PENDING

    def test_complete(self, registry):
        registry.update_status("job-1-1", JobStatus.SUMMARIZING)
        registry.complete("job-1-1", "The summary")

        job = registry.get("job-1-1")
        assert job.status == JobStatus.COMPLETED
        assert job.result == "The summary"
        assert job.error is None

    def test_fail(self, registry):
        registry.fail("job-1-1", "Could not resolve audio")

        job = registry.get("job-1-1")
        assert job.status == JobStatus.FAILED
        assert job.error == "Could not resolve audio"
        assert job.result is None

    def test_terminal_state_is_sticky(self, registry):
        registry.complete("job-1-1", "The summary")

        registry.fail("job-1-1", "late failure")
        registry.update_status("job-1-1", JobStatus.SUMMARIZING)
        registry.complete("job-1-1", "second summary")

        job = registry.get("job-1-1")
        assert job.status == JobStatus.COMPLETED
        assert job.result == "The summary"

    def test_writes_to_unknown_ids_are_ignored(self, registry):
        registry.update_status("job-missing", JobStatus.STREAMING)
        registry.complete("job-missing", "x")
        registry.fail("job-missing", "x")
        assert "job-missing" not in registry


class TestDeleteAndCounts:
    """Tests for deletion and health counts."""

    def test_delete(self, registry):
        assert registry.delete("job-1-1") is True
        assert registry.get("job-1-1") is None
        assert registry.delete("job-1-1") is False

    def test_status_counts(self, registry):
        registry.create("job-2-2")
        registry.create("job-3-3")
        registry.complete("job-2-2", "done")
        registry.fail("job-3-3", "boom")

        assert registry.status_counts() == {
            "PENDING": 1,
            "COMPLETED": 1,
            "FAILED": 1,
        }
