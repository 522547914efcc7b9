"""FastAPI dependency injection for services and settings."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from video_digest.application.services.jobs import JobDispatcher, JobRegistry
from video_digest.application.services.media import (
    AudioStagingService,
    TranscriptService,
)
from video_digest.application.services.pipelines import SummarizationPipelines
from video_digest.application.services.retry import RetryPolicy
from video_digest.application.services.speech import SpeechService
from video_digest.application.services.summarization import SummarizationService
from video_digest.commons.settings.loader import get_settings as _load_settings
from video_digest.commons.settings.models import Settings
from video_digest.commons.telemetry import (
    get_logger,
    init_langfuse,
    shutdown_langfuse,
)
from video_digest.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)

logger = get_logger(__name__)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return _load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory with all providers.

    Args:
        settings: Application settings.

    Returns:
        Configured infrastructure factory.
    """
    return get_factory(settings)


def build_dispatcher(
    settings: Settings,
    factory: InfrastructureFactory,
    registry: JobRegistry | None = None,
) -> JobDispatcher:
    """Wire the job dispatcher and its pipelines from configuration.

    Args:
        settings: Application settings.
        factory: Infrastructure factory providing the collaborators.
        registry: Registry to use; a fresh one when omitted.

    Returns:
        Dispatcher ready to accept jobs.
    """
    registry = registry or JobRegistry()
    blob_storage = factory.get_blob_storage()

    pipelines = SummarizationPipelines(
        registry=registry,
        staging=AudioStagingService(
            downloader=factory.get_youtube_downloader(),
            blob_storage=blob_storage,
            bucket=settings.blob_storage.buckets.audio,
        ),
        transcripts=TranscriptService(
            transcriber=factory.get_transcription_service(),
            blob_storage=blob_storage,
            language=settings.transcription.language,
            word_timestamps=settings.transcription.word_timestamps,
        ),
        summarizer=SummarizationService(
            llm=factory.get_llm_service(),
            video_llm=factory.get_video_llm_service(),
            output_language=settings.summarization.output_language,
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
        ),
        retry_policy=RetryPolicy.from_settings(settings.retry),
        temp_object_prefix=settings.jobs.temp_object_prefix,
    )

    return JobDispatcher(
        registry=registry,
        pipelines=pipelines,
        grace_seconds=settings.jobs.grace_seconds,
        status_path=f"{settings.server.api_prefix}/status",
    )


def get_job_dispatcher(request: Request) -> JobDispatcher:
    """Get the process-wide job dispatcher created at startup.

    Args:
        request: Current request, used to reach the application state.

    Returns:
        The job dispatcher.
    """
    dispatcher: JobDispatcher = request.app.state.job_dispatcher
    return dispatcher


def get_speech_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
) -> SpeechService:
    """Get text-to-speech service.

    Args:
        factory: Infrastructure factory.

    Returns:
        Configured speech service.
    """
    return SpeechService(factory.get_speech_service())


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
FactoryDep = Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)]
DispatcherDep = Annotated[JobDispatcher, Depends(get_job_dispatcher)]
SpeechServiceDep = Annotated[SpeechService, Depends(get_speech_service)]


async def init_services(app: FastAPI, settings: Settings) -> None:
    """Initialize infrastructure and the job dispatcher on startup.

    Args:
        app: Application whose state receives the dispatcher.
        settings: Application settings.
    """
    init_langfuse(settings.langfuse)

    factory = get_factory(settings)
    app.state.job_dispatcher = build_dispatcher(settings, factory)

    bucket = settings.blob_storage.buckets.audio
    try:
        if await factory.get_blob_storage().create_bucket(bucket):
            logger.info("Created audio bucket", extra={"bucket": bucket})
    except Exception as e:
        # Storage may come up after us; readiness reports it meanwhile
        logger.warning(
            "Could not ensure audio bucket exists",
            extra={"bucket": bucket, "error": str(e)},
        )


async def shutdown_services(app: FastAPI) -> None:
    """Stop running jobs and shut down infrastructure services."""
    dispatcher: JobDispatcher | None = getattr(app.state, "job_dispatcher", None)
    if dispatcher is not None:
        await dispatcher.close()

    try:
        factory = get_factory()
        await factory.close_all()
    except ValueError:
        pass  # Factory not initialized
    finally:
        reset_factory()
        shutdown_langfuse()
        get_settings.cache_clear()
