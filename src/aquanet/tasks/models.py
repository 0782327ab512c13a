"""Task kinds and the structured input that accompanies a request.

The controller treats structured input as an opaque value; these models
only give callers a typed way to build it. Field aliases are camelCase so
snapshots match the shape the backend prompts and exports use.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskKind(str, Enum):
    """Closed set of analysis operations the backend supports."""

    WATER_QUALITY_ANALYSIS = "water_quality_analysis"
    DISEASE_DIAGNOSIS = "disease_diagnosis"
    FEEDING_OPTIMIZATION = "feeding_optimization"
    GROWTH_PREDICTION = "growth_prediction"
    COST_ANALYSIS = "cost_analysis"
    TECHNICAL_ADVICE = "technical_advice"
    MARKET_ANALYSIS = "market_analysis"
    ENVIRONMENTAL_IMPACT = "environmental_impact"

    @property
    def label(self) -> str:
        """Display label, e.g. 'WATER QUALITY ANALYSIS'."""
        return self.value.replace("_", " ").upper()


class _InputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WaterQuality(_InputModel):
    """Water quality readings for a pond."""

    temperature: float | None = Field(default=None, description="Water temperature in °C")
    ph: float | None = Field(default=None, alias="pH", description="pH value")
    dissolved_oxygen: float | None = Field(default=None, description="Dissolved oxygen in mg/L")
    ammonia: float | None = Field(default=None, description="Total ammonia nitrogen in mg/L")
    nitrite: float | None = Field(default=None, description="Nitrite in mg/L")
    salinity: float | None = Field(default=None, description="Salinity in ppt")


class EnvironmentalData(_InputModel):
    water_quality: WaterQuality = Field(default_factory=WaterQuality)


class BiologicalData(_InputModel):
    species: str | None = None
    stage: str | None = Field(default=None, description="Life stage, e.g. 'juvenile'")
    density: float | None = Field(default=None, description="Stocking density per m²")
    average_weight: float | None = Field(default=None, description="Average weight in grams")


class InputMetadata(_InputModel):
    farm_id: str | None = None
    pond_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    source: str = Field(default="user-input", description="Provenance tag")


class AquacultureData(_InputModel):
    """Structured input for a submission.

    Groups environmental measurements, biological context and metadata.
    Ranges are deliberately not validated here.
    """

    environmental_data: EnvironmentalData = Field(default_factory=EnvironmentalData)
    biological_data: BiologicalData = Field(default_factory=BiologicalData)
    metadata: InputMetadata = Field(default_factory=InputMetadata)

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-compatible dict using the camelCase field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def default_aquaculture_data() -> AquacultureData:
    """Sample pond readings used when no input file is supplied."""
    return AquacultureData(
        environmental_data=EnvironmentalData(
            water_quality=WaterQuality(temperature=28, ph=7.5, dissolved_oxygen=5.2)
        ),
        biological_data=BiologicalData(species="shrimp", stage="juvenile"),
        metadata=InputMetadata(farm_id="farm-123", pond_id="pond-456"),
    )
