"""Unit tests for telemetry module."""

import asyncio
import json
import logging
import sys

import pytest

from video_digest.commons.settings.models import LangfuseSettings
from video_digest.commons.telemetry.decorators import LogContext, timed
from video_digest.commons.telemetry.langfuse_client import (
    init_langfuse,
    is_langfuse_enabled,
    job_trace,
)
from video_digest.commons.telemetry.logger import (
    JsonFormatter,
    TextFormatter,
    clear_log_context,
    configure_logging,
    get_correlation_id,
    get_log_context,
    set_correlation_id,
    set_log_context,
)


def _record(msg: str = "Test", level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="/test/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationId:
    """Tests for correlation ID management."""

    def test_set_and_get_correlation_id(self):
        cid = set_correlation_id("test-123")
        assert cid == "test-123"
        assert get_correlation_id() == "test-123"

    def test_auto_generate_correlation_id(self):
        cid = set_correlation_id()
        assert len(cid) == 36  # UUID format


class TestLogContext:
    """Tests for logging context management."""

    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    def test_set_and_get_context(self):
        set_log_context(job_id="job-1-1", pipeline="audio")
        ctx = get_log_context()
        assert ctx["job_id"] == "job-1-1"
        assert ctx["pipeline"] == "audio"

    def test_context_is_copied(self):
        set_log_context(key="value")
        ctx = get_log_context()
        ctx["new_key"] = "new_value"
        assert "new_key" not in get_log_context()

    def test_context_manager_restores_context(self):
        set_log_context(existing="value")

        with LogContext(job_id="job-1-1"):
            ctx = get_log_context()
            assert ctx["existing"] == "value"
            assert ctx["job_id"] == "job-1-1"

        ctx = get_log_context()
        assert ctx["existing"] == "value"
        assert "job_id" not in ctx

    def test_context_isolated_between_tasks(self):
        async def job(job_id: str) -> str | None:
            with LogContext(job_id=job_id):
                await asyncio.sleep(0)
                return get_log_context().get("job_id")

        async def main():
            return await asyncio.gather(job("job-a"), job("job-b"))

        assert asyncio.run(main()) == ["job-a", "job-b"]


class TestJsonFormatter:
    """Tests for JSON log formatter."""

    def teardown_method(self):
        clear_log_context()

    def test_basic_format(self):
        data = json.loads(JsonFormatter().format(_record("Test message")))

        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert data["path"] == "/test/file.py:42"

    def test_extra_fields_and_context(self):
        set_log_context(job_id="job-1-1")
        data = json.loads(JsonFormatter().format(_record(attempt=2)))

        assert data["context"]["job_id"] == "job-1-1"
        assert data["attempt"] == 2

    def test_format_with_exception(self):
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record("Error occurred", logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(JsonFormatter(include_path=False).format(record))

        assert "path" not in data
        assert "ValueError" in data["exception"]


class TestTextFormatter:
    """Tests for text log formatter."""

    def teardown_method(self):
        clear_log_context()

    def test_includes_job_id(self):
        set_log_context(job_id="job-1-1")
        output = TextFormatter().format(_record("Test message"))

        assert "INFO" in output
        assert "[test.logger]" in output
        assert "[job-1-1]" in output
        assert "Test message" in output


class TestConfigureLogging:
    """Tests for logger configuration."""

    def test_configure_json_logger(self):
        logger = configure_logging(
            level="DEBUG", format_type="json", logger_name="test.json"
        )
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_configure_text_logger(self):
        logger = configure_logging(
            level="INFO", format_type="text", logger_name="test.text"
        )
        assert isinstance(logger.handlers[0].formatter, TextFormatter)


class TestTimedDecorator:
    """Tests for @timed decorator."""

    def test_timed_sync_function(self, caplog):
        logger = logging.getLogger("test.timed.sync")

        @timed(logger=logger)
        def add(x, y):
            return x + y

        with caplog.at_level(logging.DEBUG, logger="test.timed.sync"):
            assert add(1, 2) == 3

        assert any("add completed" in r.getMessage() for r in caplog.records)

    async def test_timed_async_failure(self, caplog):
        logger = logging.getLogger("test.timed.async")

        @timed(logger=logger)
        async def boom():
            raise RuntimeError("nope")

        with caplog.at_level(logging.DEBUG, logger="test.timed.async"):
            with pytest.raises(RuntimeError):
                await boom()

        assert any("boom failed" in r.getMessage() for r in caplog.records)

    def test_timed_with_threshold(self, caplog):
        logger = logging.getLogger("test.timed.threshold")

        @timed(logger=logger, threshold_ms=10_000)
        def fast():
            return "fast"

        with caplog.at_level(logging.DEBUG, logger="test.timed.threshold"):
            assert fast() == "fast"

        assert caplog.records == []


class TestLangfuseDisabled:
    """Tests for tracing helpers when Langfuse is off."""

    def test_disabled_by_settings(self):
        init_langfuse(LangfuseSettings(enabled=False))
        assert is_langfuse_enabled() is False

    def test_missing_keys_disable_tracing(self):
        init_langfuse(LangfuseSettings(enabled=True))
        assert is_langfuse_enabled() is False

    def test_job_trace_yields_none(self):
        init_langfuse(LangfuseSettings(enabled=False))
        with job_trace("job-1-1", "audio") as trace:
            assert trace is None
