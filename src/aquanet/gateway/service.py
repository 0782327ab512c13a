"""Task-routed gateway backed by an LLM provider."""

from typing import Any

from ..config import GatewayConfig
from ..llm import ChatMessage, LLMProvider
from ..prompts import PromptBuilder, build_system_prompt
from ..tasks import TaskKind
from .base import RoutedCall


def build_messages(system_prompt: str, payload: str) -> list[ChatMessage]:
    """System prompt followed by the user payload."""
    return [
        ChatMessage(role="system", content=system_prompt),
        ChatMessage(role="user", content=payload),
    ]


class AquacultureService(RoutedCall):
    """One request/response call per task kind.

    Hidden design decisions:
    - How each task's prompt is built from the structured input
    - Which sampling parameters are sent to the provider
    """

    def __init__(
        self,
        provider: LLMProvider,
        config: GatewayConfig,
        prompt_builder: PromptBuilder | None = None
    ):
        self._provider = provider
        self._config = config
        self._prompt_builder = prompt_builder or PromptBuilder(self.catalog)
        self._system_prompt = build_system_prompt(config.domain_config)
        self._last_usage: dict[str, int] | None = None

    @property
    def last_usage(self) -> dict[str, int] | None:
        """Token usage of the most recent call, if reported."""
        return self._last_usage

    async def _complete(self, kind: TaskKind, data: Any, question: str) -> str:
        prompt = self._prompt_builder.build(kind, data, question)
        response = await self._provider.chat_completion(
            build_messages(self._system_prompt, prompt),
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        self._last_usage = response.usage
        return response.content

    async def analyze_water_quality(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.WATER_QUALITY_ANALYSIS, data, question)

    async def diagnose_diseases(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.DISEASE_DIAGNOSIS, data, question)

    async def optimize_feeding(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.FEEDING_OPTIMIZATION, data, question)

    async def predict_growth(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.GROWTH_PREDICTION, data, question)

    async def analyze_costs(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.COST_ANALYSIS, data, question)

    async def get_technical_advice(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.TECHNICAL_ADVICE, data, question)

    async def analyze_market(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.MARKET_ANALYSIS, data, question)

    async def assess_environmental_impact(self, data: Any, question: str = "") -> str:
        return await self._complete(TaskKind.ENVIRONMENTAL_IMPACT, data, question)

    async def close(self) -> None:
        await self._provider.close()
