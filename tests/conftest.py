"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

import pytest

from aquanet.gateway import ChunkCallback, RoutedCall, StreamingCall
from aquanet.llm import ChatMessage, LLMProvider, LLMResponse, StreamingResponse
from aquanet.tasks import TaskKind, default_aquaculture_data


class FakeStreamingGateway(StreamingCall):
    """Streaming gateway that replays scripted chunks.

    Args:
        chunks: Chunks to emit before the terminal outcome
        final: Final text (defaults to the joined chunks)
        error: Exception to raise after emitting the chunks
        gate: Event awaited before the terminal outcome
    """

    def __init__(
        self,
        chunks: list[str] | None = None,
        final: str | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.chunks = chunks or []
        self.final = final
        self.error = error
        self.gate = gate
        self.payloads: list[str] = []
        self.callbacks: list[ChunkCallback] = []
        self.closed = False

    async def stream(self, payload: str, on_chunk: ChunkCallback) -> str:
        self.payloads.append(payload)
        self.callbacks.append(on_chunk)
        for chunk in self.chunks:
            on_chunk(chunk)
            await asyncio.sleep(0)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.final if self.final is not None else "".join(self.chunks)

    async def close(self) -> None:
        self.closed = True


class FakeRoutedGateway(RoutedCall):
    """Routed gateway that records which entry point was used."""

    def __init__(self, response: str = "ok", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, Any, str]] = []

    async def _answer(self, name: str, data: Any, question: str) -> str:
        self.calls.append((name, data, question))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return f"{self.response} ({name})"

    async def analyze_water_quality(self, data, question=""):
        return await self._answer("analyze_water_quality", data, question)

    async def diagnose_diseases(self, data, question=""):
        return await self._answer("diagnose_diseases", data, question)

    async def optimize_feeding(self, data, question=""):
        return await self._answer("optimize_feeding", data, question)

    async def predict_growth(self, data, question=""):
        return await self._answer("predict_growth", data, question)

    async def analyze_costs(self, data, question=""):
        return await self._answer("analyze_costs", data, question)

    async def get_technical_advice(self, data, question=""):
        return await self._answer("get_technical_advice", data, question)

    async def analyze_market(self, data, question=""):
        return await self._answer("analyze_market", data, question)

    async def assess_environmental_impact(self, data, question=""):
        return await self._answer("assess_environmental_impact", data, question)


class FakeLLMProvider(LLMProvider):
    """LLM provider that answers from fixed chunks without network access."""

    def __init__(self, chunks: list[str] | None = None, usage: dict[str, int] | None = None):
        self.chunks = chunks if chunks is not None else ["Hello", ", ", "pond"]
        self.usage = usage
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.requests.append({
            "messages": messages, "temperature": temperature, "max_tokens": max_tokens, "stream": False
        })
        return LLMResponse(content="".join(self.chunks), model=self.model, usage=self.usage)

    async def chat_completion_stream(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.requests.append({
            "messages": messages, "temperature": temperature, "max_tokens": max_tokens, "stream": True
        })
        response: StreamingResponse

        async def _gen() -> AsyncIterator[str]:
            for chunk in self.chunks:
                yield chunk
            if self.usage is not None:
                response.set_usage(self.usage)

        response = StreamingResponse(_gen())
        return response

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Monotonic clock advanced by hand (seconds)."""

    def __init__(self, start: float = 100.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def sample_data():
    """Sample pond readings (28 °C, pH 7.5, DO 5.2, juvenile shrimp)."""
    return default_aquaculture_data()


@pytest.fixture
def flat_readings():
    return {"temperature": 28, "pH": 7.5, "dissolvedOxygen": 5.2}


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fixed_now():
    return lambda: datetime(2026, 3, 1, 9, 30, 15)


@pytest.fixture
def api_keys():
    """Return API keys from environment."""
    return {
        "deepseek": os.getenv("DEEPSEEK_API_KEY"),
        "openai": os.getenv("OPENAI_API_KEY"),
    }


@pytest.fixture
def water_task():
    return TaskKind.WATER_QUALITY_ANALYSIS
