"""Unit tests for summarization and speech services."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from video_digest.application.services.speech import SpeechService
from video_digest.application.services.summarization import SummarizationService
from video_digest.domain.exceptions import (
    MissingTextException,
    SummarizationError,
    SynthesisError,
)
from video_digest.infrastructure.llm.base import LLMResponse, LLMUsage, MessageRole
from video_digest.infrastructure.speech.base import SynthesizedSpeech

SOURCE = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def make_llm(content: str = "  A summary  ", supports_video: bool = False):
    llm = MagicMock()
    llm.supports_video = supports_video
    llm.generate = AsyncMock(
        return_value=LLMResponse(
            content=content,
            finish_reason="stop",
            usage=LLMUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
            model="test-model",
        )
    )
    return llm


@pytest.fixture
def llm():
    return make_llm()


@pytest.fixture
def video_llm():
    return make_llm("Video summary\n", supports_video=True)


@pytest.fixture
def service(llm, video_llm):
    return SummarizationService(llm, video_llm, output_language="Spanish")


class TestSummarizationService:
    """Tests for SummarizationService."""

    def test_requires_video_capable_model(self, llm):
        with pytest.raises(ValueError):
            SummarizationService(llm, make_llm(supports_video=False))

    async def test_summarize_text(self, service, llm):
        summary = await service.summarize_text("[00:00] Hello [00:01] world")

        assert summary == "A summary"
        messages = llm.generate.await_args.args[0]
        assert [m.role for m in messages] == [MessageRole.SYSTEM, MessageRole.USER]
        prompt = messages[1].content
        assert "Spanish" in prompt
        assert "[00:00] Hello [00:01] world" in prompt
        assert "[mm:ss]" in prompt
        assert messages[1].videos is None

    async def test_summarize_source_attaches_video(self, service, llm, video_llm):
        summary = await service.summarize_source(SOURCE)

        assert summary == "Video summary"
        messages = video_llm.generate.await_args.args[0]
        assert messages[1].videos == [SOURCE]
        assert "Spanish" in messages[1].content
        llm.generate.assert_not_awaited()

    async def test_generation_options_forwarded(self, llm, video_llm):
        service = SummarizationService(
            llm, video_llm, temperature=0.2, max_tokens=512
        )
        await service.summarize_text("text")

        assert llm.generate.await_args.kwargs == {
            "temperature": 0.2,
            "max_tokens": 512,
        }

    async def test_blank_output_returns_empty_string(self, video_llm):
        service = SummarizationService(make_llm("   \n"), video_llm)
        assert await service.summarize_text("text") == ""

    async def test_provider_error_propagates(self, service, llm):
        llm.generate.side_effect = SummarizationError("overloaded", status_code=503)

        with pytest.raises(SummarizationError) as exc_info:
            await service.summarize_text("text")

        assert exc_info.value.status_code == 503


class TestSpeechService:
    """Tests for SpeechService."""

    @pytest.fixture
    def synthesizer(self):
        synthesizer = MagicMock()
        synthesizer.synthesize = AsyncMock(
            return_value=SynthesizedSpeech(
                audio=b"ID3fake", content_type="audio/mp3", voice="alloy"
            )
        )
        return synthesizer

    async def test_synthesize(self, synthesizer):
        audio = await SpeechService(synthesizer).synthesize("Hello there")

        assert audio == b"ID3fake"
        synthesizer.synthesize.assert_awaited_once_with("Hello there")

    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_missing_text(self, synthesizer, text):
        with pytest.raises(MissingTextException):
            await SpeechService(synthesizer).synthesize(text)

        synthesizer.synthesize.assert_not_awaited()

    async def test_provider_error_propagates(self, synthesizer):
        synthesizer.synthesize.side_effect = SynthesisError("quota exceeded", 429)

        with pytest.raises(SynthesisError):
            await SpeechService(synthesizer).synthesize("Hello")
