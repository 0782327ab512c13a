from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, StreamingResponse


def _usage_dict(usage: Any) -> dict[str, int] | None:
    if usage is None:
        return None
    return {
        "prompt_tokens": usage.prompt_tokens,
        "completion_tokens": usage.completion_tokens,
        "total_tokens": usage.total_tokens,
    }


class OpenAICompatibleProvider(LLMProvider):
    """Provider for any service speaking the OpenAI Chat Completions API.

    Hidden design decisions:
    - API client initialization (via the OpenAI SDK)
    - Message format conversion
    - Usage capture from the final stream chunk
    """

    default_model = "gpt-4o-mini"
    default_base_url: str | None = None

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize the provider.

        Args:
            api_key: Service API key
            model: Default model (falls back to the class default)
            base_url: API base URL (falls back to the class default)
            **client_kwargs: Additional kwargs for the AsyncOpenAI client
        """
        self._model = model or self.default_model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or self.default_base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    def _request_params(
        self,
        messages: list[ChatMessage],
        model: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            "temperature": temperature,
            **kwargs,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        return params

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        completion = await self._client.chat.completions.create(**params)

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=_usage_dict(completion.usage),
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        params["stream"] = True
        params["stream_options"] = {"include_usage": True}

        response: StreamingResponse

        async def _chunks() -> AsyncIterator[str]:
            stream = await self._client.chat.completions.create(**params)
            async for chunk in stream:
                # Usage arrives on the final chunk
                usage = _usage_dict(chunk.usage)
                if usage is not None:
                    response.set_usage(usage)
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content

        response = StreamingResponse(_chunks())
        return response

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
