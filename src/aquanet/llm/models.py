from collections.abc import AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for streaming LLM responses.

    Acts as an async iterator over text chunks while keeping the text seen
    so far and the token usage reported at the end of the stream.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for chunk in stream:
            print(chunk, end="")
        print(stream.text, stream.usage)
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        self._iter = async_iter
        self._parts: list[str] = []
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Token usage info (available after iteration completes)."""
        return self._usage

    @property
    def text(self) -> str:
        """Concatenation of all chunks yielded so far."""
        return "".join(self._parts)

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by the provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        chunk = await self._iter.__anext__()
        self._parts.append(chunk)
        return chunk


class ChatMessage(BaseModel):
    """A message sent to the model."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"] = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
