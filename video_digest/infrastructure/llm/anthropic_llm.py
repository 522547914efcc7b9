"""Anthropic implementation of LLM service."""

from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from video_digest.commons.telemetry import create_llm_generation, end_llm_generation
from video_digest.domain.exceptions import SummarizationError
from video_digest.infrastructure.errors import upstream_status_code
from video_digest.infrastructure.llm.base import (
    LLMResponse,
    LLMServiceBase,
    LLMUsage,
    Message,
    MessageRole,
)


class AnthropicLLMService(LLMServiceBase):
    """Anthropic implementation of LLM service."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int = 0,
    ) -> None:
        """Initialize Anthropic LLM client.

        Args:
            api_key: Anthropic API key.
            model: Default model to use.
            base_url: Optional custom API endpoint.
            timeout: Request timeout in seconds.
            max_retries: SDK-level retries, on top of the caller's policy.
        """
        kwargs: dict[str, Any] = {
            "api_key": api_key,
            "base_url": base_url,
            "max_retries": max_retries,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._client = AsyncAnthropic(**kwargs)
        self._model = model

    async def generate(
        self,
        messages: list[Message],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Generate a completion."""
        use_model = model or self._model
        anthropic_messages, system_prompt = self._convert_messages(messages)

        kwargs: dict[str, Any] = {
            "model": use_model,
            "messages": anthropic_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if system_prompt:
            kwargs["system"] = system_prompt

        input_for_trace = list(anthropic_messages)
        if system_prompt:
            input_for_trace.insert(0, {"role": "system", "content": system_prompt})

        generation = create_llm_generation(
            name="anthropic_messages",
            model=use_model,
            input_messages=input_for_trace,
            model_parameters={"temperature": temperature, "max_tokens": max_tokens},
            metadata={"provider": "anthropic"},
        )

        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.AnthropicError as e:
            end_llm_generation(
                generation=generation,
                output=None,
                level="ERROR",
                status_message=str(e),
            )
            raise SummarizationError(
                f"Anthropic request failed: {e}", upstream_status_code(e)
            ) from e

        # Concatenate text blocks
        content = "".join(
            block.text for block in response.content if block.type == "text"
        )

        result = LLMResponse(
            content=content,
            finish_reason=response.stop_reason or "end_turn",
            usage=LLMUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens
                + response.usage.output_tokens,
            ),
            model=response.model,
        )

        end_llm_generation(
            generation=generation,
            output=result.content,
            usage=result.usage.as_dict(),
            metadata={"finish_reason": result.finish_reason},
        )

        return result

    @staticmethod
    def _convert_messages(
        messages: list[Message],
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Convert our Message format to Anthropic format.

        Returns:
            Tuple of (messages list, system prompt or None).
        """
        result: list[dict[str, Any]] = []
        system_prompt: str | None = None

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                # Anthropic handles system prompts separately
                system_prompt = msg.content
            elif msg.role == MessageRole.ASSISTANT:
                result.append({"role": "assistant", "content": msg.content})
            else:
                result.append({"role": "user", "content": msg.content})

        return result, system_prompt

    @property
    def supports_video(self) -> bool:
        """Whether this model accepts video URLs in messages."""
        return False

    @property
    def default_model(self) -> str:
        """Default model identifier."""
        return self._model
