from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse, StreamingResponse


class LLMProvider(ABC):
    """Chat model service used by the gateways.

    Hidden design decisions:
    - Which vendor SDK and endpoint serve the requests
    - How credentials reach the client
    - How vendor responses map onto LLMResponse / StreamingResponse

    Gateways own a provider and close it through the async context manager:
        async with create_llm_provider("deepseek", api_key=key) as provider:
            answer = await provider.chat_completion(messages)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model used when a call does not name one."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Answer in one piece.

        Args:
            messages: System prompt followed by the user payload
            model: Overrides ``self.model`` for this call
            temperature: 0.0 to 2.0
            max_tokens: Cap on the answer length, None for the service default
            **kwargs: Passed through to the vendor SDK

        Returns:
            Answer text with model name and token usage
        """

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Answer as an async stream of text pieces.

        Token usage, when the service reports it, is set on the returned
        StreamingResponse once the stream is exhausted.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the HTTP client."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # httpx may complain about a closed loop when torn down at exit
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
