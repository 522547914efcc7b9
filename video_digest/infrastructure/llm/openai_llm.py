"""OpenAI implementation of LLM service."""

from typing import Any

import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam

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


class OpenAILLMService(LLMServiceBase):
    """OpenAI implementation of LLM service.

    Supports GPT-4o and the other chat completion models, against either
    the public API or an Azure OpenAI deployment.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        timeout: float | None = None,
        azure: bool = False,
        api_version: str = "2024-06-01",
    ) -> None:
        """Initialize OpenAI LLM client.

        Args:
            api_key: OpenAI API key.
            model: Default model (or Azure deployment) to use.
            base_url: Optional custom API endpoint; the resource endpoint
                when ``azure`` is set.
            timeout: Request timeout in seconds.
            azure: Talk to an Azure OpenAI resource.
            api_version: Azure API version.
        """
        # Retries are owned by the caller's retry policy.
        self._client: AsyncOpenAI
        if azure:
            self._client = AsyncAzureOpenAI(
                api_key=api_key,
                azure_endpoint=base_url or "",
                api_version=api_version,
                timeout=timeout,
                max_retries=0,
            )
        else:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )
        self._model = model
        self._provider = "azure_openai" if azure else "openai"

    async def generate(
        self,
        messages: list[Message],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Generate a completion."""
        use_model = model or self._model
        openai_messages = self._convert_messages(messages)

        kwargs: dict[str, Any] = {
            "model": use_model,
            "messages": openai_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        generation = create_llm_generation(
            name="openai_chat_completion",
            model=use_model,
            input_messages=[
                {"role": m["role"], "content": str(m.get("content", ""))}
                for m in openai_messages
            ],
            model_parameters={"temperature": temperature, "max_tokens": max_tokens},
            metadata={"provider": self._provider},
        )

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            end_llm_generation(
                generation=generation,
                output=None,
                level="ERROR",
                status_message=str(e),
            )
            raise SummarizationError(
                f"Chat completion failed: {e}", upstream_status_code(e)
            ) from e

        choice = response.choices[0]
        usage = response.usage

        result = LLMResponse(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason or "stop",
            usage=LLMUsage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
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
    ) -> list[ChatCompletionMessageParam]:
        """Convert our Message format to OpenAI format."""
        result: list[ChatCompletionMessageParam] = []

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                result.append({"role": "system", "content": msg.content})
            elif msg.role == MessageRole.ASSISTANT:
                result.append({"role": "assistant", "content": msg.content})
            else:
                result.append({"role": "user", "content": msg.content})

        return result

    @property
    def supports_video(self) -> bool:
        """Whether this model accepts video URLs in messages."""
        return False

    @property
    def default_model(self) -> str:
        """Default model identifier."""
        return self._model
