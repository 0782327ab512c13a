"""Catalog of supported task kinds.

Hides which prompt template and which backend entry point serve each
task kind, and what structured data each one expects.
"""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from ..errors import UnknownTaskKindError
from .models import TaskKind

# Routes free-text questions submitted without a task kind
DEFAULT_TASK_KIND = TaskKind.TECHNICAL_ADVICE

_WATER = ("temperature", "pH", "dissolvedOxygen")
_ANIMAL = ("species", "stage")


class TaskSpec(BaseModel):
    """How a single task kind is served."""

    model_config = ConfigDict(frozen=True)

    kind: TaskKind
    template: str = Field(description="Prompt template name (without .txt)")
    entry_point: str = Field(description="Method name on the routed gateway")
    required_fields: tuple[str, ...] = Field(
        default=(),
        description="Structured input fields the template interpolates"
    )

    @property
    def label(self) -> str:
        return self.kind.label


_SPECS: dict[TaskKind, TaskSpec] = {
    spec.kind: spec
    for spec in (
        TaskSpec(
            kind=TaskKind.WATER_QUALITY_ANALYSIS,
            template="water_quality_analysis",
            entry_point="analyze_water_quality",
            required_fields=_WATER + _ANIMAL,
        ),
        TaskSpec(
            kind=TaskKind.DISEASE_DIAGNOSIS,
            template="disease_diagnosis",
            entry_point="diagnose_diseases",
            required_fields=_WATER + _ANIMAL,
        ),
        TaskSpec(
            kind=TaskKind.FEEDING_OPTIMIZATION,
            template="feeding_optimization",
            entry_point="optimize_feeding",
            required_fields=_ANIMAL + ("temperature", "dissolvedOxygen", "averageWeight"),
        ),
        TaskSpec(
            kind=TaskKind.GROWTH_PREDICTION,
            template="growth_prediction",
            entry_point="predict_growth",
            required_fields=_ANIMAL + ("temperature", "density", "averageWeight"),
        ),
        TaskSpec(
            kind=TaskKind.COST_ANALYSIS,
            template="cost_analysis",
            entry_point="analyze_costs",
            required_fields=_ANIMAL + ("farmId", "pondId"),
        ),
        TaskSpec(
            kind=TaskKind.TECHNICAL_ADVICE,
            template="technical_advice",
            entry_point="get_technical_advice",
            required_fields=_ANIMAL,
        ),
        TaskSpec(
            kind=TaskKind.MARKET_ANALYSIS,
            template="market_analysis",
            entry_point="analyze_market",
            required_fields=_ANIMAL,
        ),
        TaskSpec(
            kind=TaskKind.ENVIRONMENTAL_IMPACT,
            template="environmental_impact",
            entry_point="assess_environmental_impact",
            required_fields=_WATER + ("salinity", "species"),
        ),
    )
}


class TaskCatalog:
    """Read-only registry of task specs keyed by task kind."""

    def __init__(self, specs: dict[TaskKind, TaskSpec] | None = None):
        self._specs = dict(specs if specs is not None else _SPECS)

    def resolve(self, kind: TaskKind) -> TaskSpec:
        """Get the spec for a task kind.

        Raises:
            UnknownTaskKindError: If kind is not part of the catalog
        """
        spec = self.find(kind)
        if spec is None:
            raise UnknownTaskKindError(kind)
        return spec

    def find(self, kind: object) -> TaskSpec | None:
        """Non-raising lookup; accepts enum members or their string values."""
        try:
            return self._specs.get(TaskKind(kind))
        except ValueError:
            return None

    def kinds(self) -> list[TaskKind]:
        return list(self._specs)

    def __iter__(self) -> Iterator[TaskSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, kind: object) -> bool:
        return self.find(kind) is not None


default_catalog = TaskCatalog()
