"""Summary generation over transcripts and whole videos."""

from video_digest.commons.telemetry import get_logger, timed
from video_digest.infrastructure.llm.base import LLMServiceBase, Message, MessageRole

SYSTEM_PROMPT = "You are a professional assistant that summarizes video content."

TRANSCRIPT_PROMPT = """Summarize the following transcript of a video. Your summary must:
1. Be written in {language}.
2. Be detailed, clear and concise, focusing on the main events, observations \
and highlights.
3. Be divided into major sections and subsections by topic (for example: \
Introduction, Observations, Experiences, Key Facts, Conclusion).
4. Cite timestamps ([mm:ss] or [mm:ss]-[mm:ss]) right after every key point \
or group of key points.

Suggested structure:
- Summary title
- Section 1: Introduction / context (with timestamps)
- Sections 2..n: One per main topic (with timestamps)
- Final section: Conclusion / closing observations (with timestamps)

Each line of the transcript is one recognized passage; every word is \
preceded by its start time as [mm:ss].

---
{transcript}
---
"""

VIDEO_PROMPT = """Watch the attached video and summarize it. Your summary must:
1. Be written in {language}.
2. Be detailed, clear and concise, covering what is said and what is shown.
3. Be divided into major sections and subsections by topic.
4. Cite timestamps ([mm:ss] or [mm:ss]-[mm:ss]) right after every key point \
or group of key points.
"""


class SummarizationService:
    """Generates summaries with a text LLM and a video-capable LLM.

    Provider failures propagate as ``SummarizationError`` with the upstream
    status code intact; retrying is left to the caller.
    """

    def __init__(
        self,
        llm: LLMServiceBase,
        video_llm: LLMServiceBase,
        output_language: str = "English",
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> None:
        """Initialize the summarization service.

        Args:
            llm: Model used to summarize transcripts.
            video_llm: Model used to summarize a video from its URL.
            output_language: Language the summary is written in.
            temperature: Sampling temperature.
            max_tokens: Maximum summary length in tokens.

        Raises:
            ValueError: If ``video_llm`` can't take video input.
        """
        if not video_llm.supports_video:
            raise ValueError("video_llm must support video input")
        self._llm = llm
        self._video_llm = video_llm
        self._language = output_language
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._logger = get_logger(__name__)

    @timed
    async def summarize_text(self, text: str) -> str:
        """Summarize a timestamped transcript.

        Returns:
            The summary, or an empty string if the model produced nothing.
        """
        messages = [
            Message(role=MessageRole.SYSTEM, content=SYSTEM_PROMPT),
            Message(
                role=MessageRole.USER,
                content=TRANSCRIPT_PROMPT.format(
                    language=self._language, transcript=text
                ),
            ),
        ]
        response = await self._llm.generate(
            messages,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        self._logger.info(
            "Transcript summarized",
            extra={
                "model": response.model,
                "finish_reason": response.finish_reason,
                "total_tokens": response.usage.total_tokens,
            },
        )
        return response.content.strip()

    @timed
    async def summarize_source(self, source_ref: str) -> str:
        """Summarize a video directly from its URL.

        Returns:
            The summary, or an empty string if the model produced nothing.
        """
        messages = [
            Message(role=MessageRole.SYSTEM, content=SYSTEM_PROMPT),
            Message(
                role=MessageRole.USER,
                content=VIDEO_PROMPT.format(language=self._language),
                videos=[source_ref],
            ),
        ]
        response = await self._video_llm.generate(
            messages,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        self._logger.info(
            "Video summarized",
            extra={
                "model": response.model,
                "finish_reason": response.finish_reason,
                "total_tokens": response.usage.total_tokens,
            },
        )
        return response.content.strip()
