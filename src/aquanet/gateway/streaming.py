"""Streaming gateway backed by an LLM provider."""

from ..config import GatewayConfig
from ..llm import LLMProvider
from ..prompts import build_system_prompt
from .base import ChunkCallback, StreamingCall
from .service import build_messages


class StreamingAssistant(StreamingCall):
    """Sends the prompt payload as-is and streams the answer back.

    With response_format "complete" the provider is asked for the whole
    answer at once and no chunks are reported.
    """

    def __init__(self, provider: LLMProvider, config: GatewayConfig):
        self._provider = provider
        self._config = config
        self._system_prompt = build_system_prompt(config.domain_config)
        self._last_usage: dict | None = None

    @property
    def last_usage(self) -> dict | None:
        return self._last_usage

    async def stream(self, payload: str, on_chunk: ChunkCallback) -> str:
        messages = build_messages(self._system_prompt, payload)

        if self._config.response_format == "complete":
            response = await self._provider.chat_completion(
                messages,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
            self._last_usage = response.usage
            return response.content

        stream_response = await self._provider.chat_completion_stream(
            messages,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        async for chunk in stream_response:
            on_chunk(chunk)

        self._last_usage = stream_response.usage
        return stream_response.text

    async def close(self) -> None:
        await self._provider.close()
