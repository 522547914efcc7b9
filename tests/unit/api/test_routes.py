"""Unit tests for API routes."""

import asyncio
import re
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from video_digest.api.main import create_app
from video_digest.application.services.jobs import (
    DispatchReceipt,
    JobDispatcher,
    JobRegistry,
)
from video_digest.application.services.pipelines import SummarizationPipelines
from video_digest.application.services.retry import RetryPolicy
from video_digest.application.services.speech import SpeechService
from video_digest.commons.infrastructure.blob import HealthStatus
from video_digest.domain.exceptions import (
    InvalidSourceReferenceException,
    SynthesisError,
    TranscriptionError,
)
from video_digest.domain.models.job import Job, JobStatus, PipelineKind
from video_digest.infrastructure.speech.base import SynthesizedSpeech

SOURCE = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def mock_settings():
    """Create mock settings for the app."""
    settings = MagicMock()
    settings.app.name = "test-app"
    settings.app.version = "0.1.0"
    settings.app.environment = "test"
    settings.server.cors_origins = ["*"]
    settings.server.api_prefix = ""
    settings.server.docs_enabled = True
    settings.blob_storage.provider = "minio"
    return settings


@pytest.fixture
def mock_factory():
    """Create mock infrastructure factory."""
    factory = MagicMock()
    blob = MagicMock()
    blob.health_check = AsyncMock(
        return_value=HealthStatus(healthy=True, latency_ms=1.0)
    )
    factory.get_blob_storage.return_value = blob
    return factory


@pytest.fixture
def mock_dispatcher():
    """Create mock job dispatcher."""
    dispatcher = MagicMock()
    dispatcher.dispatch.return_value = DispatchReceipt(
        job_id="job-1700000000000-42",
        status_url="/status/job-1700000000000-42",
    )
    dispatcher.poll.return_value = None
    dispatcher.running_jobs = 0
    dispatcher.registry.status_counts.return_value = {"COMPLETED": 2}
    return dispatcher


@pytest.fixture
def mock_synthesizer():
    """Create mock text-to-speech provider."""
    synthesizer = MagicMock()
    synthesizer.synthesize = AsyncMock(
        return_value=SynthesizedSpeech(
            audio=b"ID3\x04fake-mp3", content_type="audio/mp3", voice="alloy"
        )
    )
    return synthesizer


def build_app(mock_settings, mock_factory, dispatcher, synthesizer) -> FastAPI:
    from video_digest.api.dependencies import (
        get_infrastructure_factory,
        get_job_dispatcher,
        get_settings,
        get_speech_service,
    )

    with (
        patch("video_digest.api.main.get_settings", return_value=mock_settings),
        patch("video_digest.api.dependencies.init_services", new_callable=AsyncMock),
        patch(
            "video_digest.api.dependencies.shutdown_services", new_callable=AsyncMock
        ),
    ):
        app = create_app()
        # Override dependencies using FastAPI's proper mechanism
        app.dependency_overrides[get_settings] = lambda: mock_settings
        app.dependency_overrides[get_infrastructure_factory] = lambda: mock_factory
        app.dependency_overrides[get_job_dispatcher] = lambda: dispatcher
        app.dependency_overrides[get_speech_service] = lambda: SpeechService(
            synthesizer
        )
        app.state.job_dispatcher = dispatcher
        return app


def build_client(mock_settings, mock_factory, dispatcher, synthesizer) -> TestClient:
    app = build_app(mock_settings, mock_factory, dispatcher, synthesizer)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(mock_settings, mock_factory, mock_dispatcher, mock_synthesizer):
    """Create test client with mocked dependencies."""
    return build_client(mock_settings, mock_factory, mock_dispatcher, mock_synthesizer)


class TestHealthRoutes:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["jobs"] == {"COMPLETED": 2}
        names = {c["name"] for c in data["components"]}
        assert names == {"blob_storage", "job_dispatcher"}

    def test_health_degraded_without_storage(self, client, mock_factory):
        mock_factory.get_blob_storage.return_value.health_check.return_value = (
            HealthStatus(healthy=False, latency_ms=0.0, message="refused")
        )
        response = client.get("/health")
        assert response.json()["status"] == "degraded"

    def test_liveness_check(self, client):
        response = client.get("/health/live")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok"}

    def test_readiness_check(self, client):
        response = client.get("/health/ready")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["ready"] is True
        assert data["checks"] == {"job_dispatcher": True, "blob_storage": True}


class TestSummarizeRoutes:
    """Tests for the summarization endpoints."""

    @pytest.mark.parametrize(
        ("path", "pipeline"),
        [("/summarize", PipelineKind.AUDIO), ("/summarize-video", PipelineKind.VIDEO)],
    )
    def test_accepts_job(self, client, mock_dispatcher, path, pipeline):
        response = client.post(path, json={"sourceRef": SOURCE})

        assert response.status_code == status.HTTP_202_ACCEPTED
        data = response.json()
        assert data["jobId"] == "job-1700000000000-42"
        assert data["statusUrl"] == "/status/job-1700000000000-42"
        assert data["message"]
        mock_dispatcher.dispatch.assert_called_once_with(SOURCE, pipeline)

    def test_accepts_youtube_url_field(self, client, mock_dispatcher):
        response = client.post("/summarize", json={"youtubeUrl": SOURCE})

        assert response.status_code == status.HTTP_202_ACCEPTED
        mock_dispatcher.dispatch.assert_called_once_with(SOURCE, PipelineKind.AUDIO)

    def test_missing_source_returns_400(self, client, mock_dispatcher):
        mock_dispatcher.dispatch.side_effect = InvalidSourceReferenceException()

        response = client.post("/summarize", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "INVALID_SOURCE_REFERENCE"
        assert error["message"] == "Missing source reference."
        mock_dispatcher.dispatch.assert_called_once_with(None, PipelineKind.AUDIO)

    @pytest.mark.parametrize("path", ["/summarize", "/summarize-video"])
    def test_empty_body_rejected_without_creating_job(
        self, mock_settings, mock_factory, mock_synthesizer, path
    ):
        pipelines = MagicMock()
        pipelines.run = AsyncMock(return_value="unused")
        registry = JobRegistry()
        client = build_client(
            mock_settings,
            mock_factory,
            JobDispatcher(registry, pipelines),
            mock_synthesizer,
        )

        response = client.post(path)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(registry) == 0
        pipelines.run.assert_not_awaited()

    def test_malformed_body_returns_400(self, client, mock_dispatcher):
        response = client.post("/summarize", json={"sourceRef": ["not", "a", "url"]})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        mock_dispatcher.dispatch.assert_not_called()


class TestStatusRoute:
    """Tests for job status polling."""

    def test_completed_job(self, client, mock_dispatcher):
        mock_dispatcher.poll.return_value = Job(id="job-1-1").mark_completed(
            "The summary"
        )

        response = client.get("/status/job-1-1")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "COMPLETED",
            "result": "The summary",
            "error": None,
        }
        mock_dispatcher.poll.assert_called_once_with("job-1-1")

    def test_in_progress_job(self, client, mock_dispatcher):
        mock_dispatcher.poll.return_value = Job(id="job-1-1").transition_to(
            JobStatus.TRANSCRIBING
        )

        data = client.get("/status/job-1-1").json()

        assert data["status"] == "TRANSCRIBING"
        assert data["result"] is None

    def test_failed_job(self, client, mock_dispatcher):
        mock_dispatcher.poll.return_value = Job(id="job-1-1").mark_failed("boom")

        data = client.get("/status/job-1-1").json()

        assert data == {"status": "FAILED", "result": None, "error": "boom"}

    def test_unknown_job_returns_404(self, client):
        response = client.get("/status/job-0-0")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        error = response.json()["error"]
        assert error["code"] == "JOB_NOT_FOUND"
        assert error["message"] == "Job ID not found: job-0-0"
        assert error["details"] == {"job_id": "job-0-0"}


class TestJobLifecycleOverHttp:
    """Submit, poll and expire a job through the HTTP surface."""

    GRACE_SECONDS = 0.2

    @pytest.fixture
    def staging(self):
        staging = MagicMock()
        staging.extract_and_upload = AsyncMock(
            return_value="s3://youtube-audio/youtube_audio_1-abcd1234"
        )
        staging.delete_temporary_object = AsyncMock()
        return staging

    @pytest.fixture
    def transcripts(self):
        transcripts = MagicMock()
        transcripts.transcribe = AsyncMock(return_value="[00:01] Hello world")
        return transcripts

    @pytest.fixture
    def summarizer(self):
        summarizer = MagicMock()
        summarizer.summarize_text = AsyncMock(return_value="A short summary")
        return summarizer

    @pytest.fixture
    def app(
        self,
        mock_settings,
        mock_factory,
        mock_synthesizer,
        staging,
        transcripts,
        summarizer,
    ):
        registry = JobRegistry()
        pipelines = SummarizationPipelines(
            registry,
            staging,
            transcripts,
            summarizer,
            RetryPolicy(max_jitter=0.0),
        )
        dispatcher = JobDispatcher(
            registry, pipelines, grace_seconds=self.GRACE_SECONDS
        )
        return build_app(mock_settings, mock_factory, dispatcher, mock_synthesizer)

    @staticmethod
    async def poll_until_settled(client: httpx.AsyncClient, url: str) -> dict:
        for _ in range(100):
            response = await client.get(url)
            assert response.status_code == status.HTTP_200_OK
            data = response.json()
            if data["status"] in ("COMPLETED", "FAILED"):
                return data
            await asyncio.sleep(0.01)
        raise AssertionError(f"{url} never settled")

    async def test_completed_job_expires_after_grace(self, app, staging):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(
            transport=transport, base_url="http://test"
        ) as client:
            response = await client.post("/summarize", json={"sourceRef": SOURCE})

            assert response.status_code == status.HTTP_202_ACCEPTED
            accepted = response.json()
            assert re.match(r"^job-\d+-\d+$", accepted["jobId"])

            data = await self.poll_until_settled(client, accepted["statusUrl"])
            assert data == {
                "status": "COMPLETED",
                "result": "A short summary",
                "error": None,
            }

            await asyncio.sleep(self.GRACE_SECONDS * 3)
            response = await client.get(accepted["statusUrl"])
            assert response.status_code == status.HTTP_404_NOT_FOUND

        staging.delete_temporary_object.assert_awaited_once()

    async def test_failed_job_is_stable_then_expires(
        self, app, staging, transcripts, summarizer
    ):
        transcripts.transcribe.side_effect = TranscriptionError("stt down")
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(
            transport=transport, base_url="http://test"
        ) as client:
            response = await client.post("/summarize", json={"sourceRef": SOURCE})
            status_url = response.json()["statusUrl"]

            first = await self.poll_until_settled(client, status_url)
            second = (await client.get(status_url)).json()

            assert first == second == {
                "status": "FAILED",
                "result": None,
                "error": "stt down",
            }

            await asyncio.sleep(self.GRACE_SECONDS * 3)
            response = await client.get(status_url)
            assert response.status_code == status.HTTP_404_NOT_FOUND
            assert response.json()["error"]["code"] == "JOB_NOT_FOUND"

        staging.delete_temporary_object.assert_awaited_once()
        summarizer.summarize_text.assert_not_called()


class TestSpeakRoute:
    """Tests for the text-to-speech endpoint."""

    def test_returns_mp3(self, client, mock_synthesizer):
        response = client.post("/speak", json={"text": "Hello there"})

        assert response.status_code == status.HTTP_200_OK
        assert re.match(r"^audio/mp3", response.headers["content-type"])
        assert response.content == b"ID3\x04fake-mp3"
        mock_synthesizer.synthesize.assert_awaited_once_with("Hello there")

    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, None])
    def test_missing_text_returns_400(self, client, mock_synthesizer, payload):
        response = client.post("/speak", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "MISSING_TEXT"
        assert error["message"] == "Missing text for conversion."
        mock_synthesizer.synthesize.assert_not_awaited()

    def test_synthesis_failure_returns_500(self, client, mock_synthesizer):
        mock_synthesizer.synthesize.side_effect = SynthesisError("quota", 429)

        response = client.post("/speak", json={"text": "Hello"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        error = response.json()["error"]
        assert error["code"] == "SYNTHESIS_ERROR"
        assert error["message"] == "Could not generate speech from text."
