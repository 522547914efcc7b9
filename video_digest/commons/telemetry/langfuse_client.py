"""Langfuse integration for LLM observability."""

from __future__ import annotations

import contextlib
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from langfuse import Langfuse

if TYPE_CHECKING:
    from collections.abc import Generator

    from langfuse.client import StatefulGenerationClient, StatefulTraceClient

    from video_digest.commons.settings.models import LangfuseSettings

logger = logging.getLogger(__name__)


@dataclass
class _LangfuseState:
    """Internal state holder for the Langfuse client."""

    client: Langfuse | None = None
    enabled: bool = False
    current_trace: ContextVar[Any] = field(
        default_factory=lambda: ContextVar("current_trace", default=None)
    )


_state = _LangfuseState()


def init_langfuse(settings: LangfuseSettings) -> None:
    """Initialize the global Langfuse client.

    Tracing stays off when disabled in settings or when keys are missing.

    Args:
        settings: Langfuse configuration settings.
    """
    if not settings.enabled:
        logger.info("Langfuse is disabled")
        _state.enabled = False
        return

    if not settings.public_key or not settings.secret_key:
        logger.warning("Langfuse keys not configured, tracing disabled")
        _state.enabled = False
        return

    try:
        _state.client = Langfuse(
            public_key=settings.public_key,
            secret_key=settings.secret_key,
            host=settings.host,
            debug=settings.debug,
            sample_rate=settings.sample_rate,
            flush_at=settings.flush_at,
            flush_interval=settings.flush_interval,
        )
        _state.enabled = True
        logger.info("Langfuse initialized", extra={"host": settings.host})
    except Exception as e:
        logger.error("Failed to initialize Langfuse", extra={"error": str(e)})
        _state.enabled = False


def shutdown_langfuse() -> None:
    """Flush and shut down the Langfuse client."""
    if _state.client is None:
        return
    try:
        _state.client.flush()
        _state.client.shutdown()
        logger.info("Langfuse shut down")
    except Exception as e:
        logger.error("Error shutting down Langfuse", extra={"error": str(e)})
    finally:
        _state.client = None
        _state.enabled = False


def is_langfuse_enabled() -> bool:
    """Check if Langfuse tracing is enabled."""
    return _state.enabled


@contextmanager
def job_trace(
    job_id: str,
    pipeline: str,
    metadata: dict[str, Any] | None = None,
) -> Generator[StatefulTraceClient | None, None, None]:
    """Open a Langfuse trace covering one job's pipeline run.

    LLM generations created inside the block attach to this trace. Each
    asyncio task has its own context, so concurrent jobs never share it.

    Args:
        job_id: Job identifier, used as the trace session.
        pipeline: Pipeline kind, used in the trace name and tags.
        metadata: Optional metadata dictionary.

    Yields:
        The trace object or None if Langfuse is not enabled.
    """
    if not is_langfuse_enabled() or _state.client is None:
        yield None
        return

    token = None
    try:
        trace = _state.client.trace(
            name=f"{pipeline}_summarization",
            session_id=job_id,
            metadata=metadata or {},
            tags=[pipeline],
        )
        token = _state.current_trace.set(trace)
    except Exception as e:
        logger.error("Error creating Langfuse trace", extra={"error": str(e)})
        trace = None

    try:
        yield trace
    finally:
        if token is not None:
            with contextlib.suppress(ValueError):
                _state.current_trace.reset(token)


def create_llm_generation(
    name: str,
    model: str,
    input_messages: list[dict[str, Any]],
    model_parameters: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
) -> StatefulGenerationClient | None:
    """Create a new LLM generation for tracking.

    Attaches to the current job trace, or to a fresh standalone trace when
    called outside a job (e.g. from a script).

    Returns:
        The generation object for updating with output, or None if disabled.
    """
    if not is_langfuse_enabled() or _state.client is None:
        return None

    try:
        parent = _state.current_trace.get() or _state.client.trace(
            name=f"standalone_{name}"
        )
        return parent.generation(
            name=name,
            model=model,
            input=input_messages,
            model_parameters=model_parameters or {},
            metadata=metadata or {},
        )
    except Exception as e:
        logger.error("Error creating LLM generation", extra={"error": str(e)})
        return None


def end_llm_generation(
    generation: StatefulGenerationClient | None,
    output: str | dict[str, Any] | None,
    usage: dict[str, int] | None = None,
    metadata: dict[str, Any] | None = None,
    level: str = "DEFAULT",
    status_message: str | None = None,
) -> None:
    """End an LLM generation with output and usage.

    Args:
        generation: The generation object to update.
        output: The LLM output.
        usage: Token usage dict with prompt_tokens, completion_tokens, total_tokens.
        metadata: Additional metadata to add.
        level: Log level (DEFAULT, DEBUG, WARNING, ERROR).
        status_message: Optional status message.
    """
    if generation is None:
        return

    try:
        generation.end(
            output=output,
            usage=usage,
            metadata=metadata,
            level=level,
            status_message=status_message,
        )
    except Exception as e:
        logger.error("Error ending LLM generation", extra={"error": str(e)})
