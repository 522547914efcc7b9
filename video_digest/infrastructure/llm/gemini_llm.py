"""Google Gemini implementation of LLM service."""

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

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


class GeminiLLMService(LLMServiceBase):
    """Gemini implementation of LLM service.

    Video URLs on a message (YouTube links included) are passed to the model
    as file data, so the model watches the source itself.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
    ) -> None:
        """Initialize Gemini client.

        Args:
            api_key: Google AI Studio API key.
            model: Default model to use.
        """
        self._api_key = api_key
        self._client: genai.Client | None = None
        self._model = model

    def _get_client(self) -> genai.Client:
        """Create the client on first use; it validates the key eagerly."""
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(
        self,
        messages: list[Message],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Generate a completion."""
        use_model = model or self._model
        contents, system_prompt = self._convert_messages(messages)

        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            system_instruction=system_prompt,
        )

        generation = create_llm_generation(
            name="gemini_generate_content",
            model=use_model,
            input_messages=[
                {
                    "role": m.role.value,
                    "content": m.content,
                    "videos": m.videos or [],
                }
                for m in messages
            ],
            model_parameters={"temperature": temperature, "max_tokens": max_tokens},
            metadata={"provider": "google"},
        )

        try:
            response = await self._get_client().aio.models.generate_content(
                model=use_model,
                contents=contents,
                config=config,
            )
        except (genai_errors.APIError, httpx.TimeoutException) as e:
            end_llm_generation(
                generation=generation,
                output=None,
                level="ERROR",
                status_message=str(e),
            )
            raise SummarizationError(
                f"Gemini request failed: {e}", upstream_status_code(e)
            ) from e

        usage = response.usage_metadata
        prompt_tokens = (usage.prompt_token_count or 0) if usage else 0
        completion_tokens = (usage.candidates_token_count or 0) if usage else 0
        finish_reason = "stop"
        if response.candidates and response.candidates[0].finish_reason:
            finish_reason = str(response.candidates[0].finish_reason.value).lower()

        result = LLMResponse(
            content=response.text or "",
            finish_reason=finish_reason,
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            model=use_model,
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
    ) -> tuple[list[types.Content], str | None]:
        """Convert our Message format to Gemini contents.

        Returns:
            Tuple of (contents list, system instruction or None).
        """
        contents: list[types.Content] = []
        system_prompt: str | None = None

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_prompt = msg.content
                continue

            parts: list[types.Part] = [
                types.Part(file_data=types.FileData(file_uri=video))
                for video in msg.videos or []
            ]
            parts.append(types.Part(text=msg.content))

            role = "model" if msg.role == MessageRole.ASSISTANT else "user"
            contents.append(types.Content(role=role, parts=parts))

        return contents, system_prompt

    @property
    def supports_video(self) -> bool:
        """Whether this model accepts video URLs in messages."""
        return True

    @property
    def default_model(self) -> str:
        """Default model identifier."""
        return self._model
