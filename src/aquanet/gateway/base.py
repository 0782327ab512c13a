"""Backend gateway capability interface.

The controller talks to the model service through exactly one of two
capability variants, chosen when the gateway is constructed:

- RoutedCall: one request/response method per task kind.
- StreamingCall: a single method that takes the prompt payload and a chunk
  callback and resolves with the final text.

Either way an invocation has at most one terminal outcome (a return value
or a raised exception), and chunks are delivered strictly before it.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..tasks import TaskCatalog, TaskKind, default_catalog

ChunkCallback = Callable[[str], None]


class BackendGateway(ABC):
    """Common base for both capability variants."""

    async def close(self) -> None:
        """Release resources held by the gateway."""

    async def __aenter__(self) -> "BackendGateway":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


class RoutedCall(BackendGateway):
    """Task-routed request/response gateway.

    Each task kind maps to one method through the catalog's entry point.
    """

    catalog: TaskCatalog = default_catalog

    async def call(self, kind: TaskKind, data: Any, question: str = "") -> str:
        """Dispatch to the method serving ``kind``.

        Raises:
            UnknownTaskKindError: If kind is not in the catalog
        """
        spec = self.catalog.resolve(kind)
        method = getattr(self, spec.entry_point)
        return await method(data, question)

    @abstractmethod
    async def analyze_water_quality(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def diagnose_diseases(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def optimize_feeding(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def predict_growth(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def analyze_costs(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def get_technical_advice(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def analyze_market(self, data: Any, question: str = "") -> str: ...

    @abstractmethod
    async def assess_environmental_impact(self, data: Any, question: str = "") -> str: ...


class StreamingCall(BackendGateway):
    """Single-method gateway that streams chunks of the answer."""

    @abstractmethod
    async def stream(self, payload: str, on_chunk: ChunkCallback) -> str:
        """Send ``payload`` and report chunks until the final text.

        Args:
            payload: Prompt text
            on_chunk: Called with each text fragment, in emission order

        Returns:
            The complete response text
        """
