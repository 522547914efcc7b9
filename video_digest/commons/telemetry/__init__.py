"""Telemetry module - logging, timing, and LLM tracing."""

from video_digest.commons.telemetry.decorators import LogContext, timed
from video_digest.commons.telemetry.langfuse_client import (
    create_llm_generation,
    end_llm_generation,
    init_langfuse,
    job_trace,
    shutdown_langfuse,
)
from video_digest.commons.telemetry.logger import (
    JsonFormatter,
    TextFormatter,
    configure_logging,
    get_correlation_id,
    get_log_context,
    get_logger,
    set_correlation_id,
)

__all__ = [
    # Decorators
    "timed",
    "LogContext",
    # Logger
    "get_logger",
    "configure_logging",
    "JsonFormatter",
    "TextFormatter",
    # Correlation ID
    "get_correlation_id",
    "set_correlation_id",
    # Log Context
    "get_log_context",
    # Langfuse
    "init_langfuse",
    "shutdown_langfuse",
    "job_trace",
    "create_llm_generation",
    "end_llm_generation",
]
