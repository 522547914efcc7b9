"""Abstract base class for LLM services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class MessageRole(str, Enum):
    """Role of a message in the conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """A message in the conversation."""

    role: MessageRole
    content: str
    videos: list[str] | None = None  # URLs for video-capable models


@dataclass
class LLMUsage:
    """Token usage statistics."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    def as_dict(self) -> dict[str, int]:
        """Usage in the shape Langfuse generations expect."""
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass
class LLMResponse:
    """Response from LLM generation."""

    content: str
    finish_reason: str
    usage: LLMUsage
    model: str


class LLMServiceBase(ABC):
    """Abstract base class for LLM services.

    Implementations should handle:
    - OpenAI (GPT-4o) and Azure OpenAI
    - Anthropic (Claude)
    - Google (Gemini), the only one that accepts video input

    Provider failures surface as ``SummarizationError`` carrying the
    upstream status code, so callers can tell transient failures apart.
    """

    @abstractmethod
    async def generate(
        self,
        messages: list[Message],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Generate a completion.

        Args:
            messages: List of conversation messages.
            model: Optional model override.
            temperature: Sampling temperature (0.0-2.0).
            max_tokens: Maximum tokens to generate.

        Returns:
            LLM response with content and usage.

        Raises:
            SummarizationError: If the provider call fails.
        """

    @property
    @abstractmethod
    def supports_video(self) -> bool:
        """Whether this model accepts video URLs in messages."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Default model identifier."""
