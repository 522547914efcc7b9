"""LLM services."""

from video_digest.infrastructure.llm.anthropic_llm import AnthropicLLMService
from video_digest.infrastructure.llm.base import (
    LLMResponse,
    LLMServiceBase,
    LLMUsage,
    Message,
    MessageRole,
)
from video_digest.infrastructure.llm.gemini_llm import GeminiLLMService
from video_digest.infrastructure.llm.openai_llm import OpenAILLMService

__all__ = [
    # Base classes
    "LLMServiceBase",
    "LLMResponse",
    "LLMUsage",
    "Message",
    "MessageRole",
    # Implementations
    "AnthropicLLMService",
    "GeminiLLMService",
    "OpenAILLMService",
]
