"""Task kinds, structured input shapes and the task catalog."""

from .catalog import DEFAULT_TASK_KIND, TaskCatalog, TaskSpec, default_catalog
from .models import (
    AquacultureData,
    BiologicalData,
    EnvironmentalData,
    InputMetadata,
    TaskKind,
    WaterQuality,
    default_aquaculture_data,
)

__all__ = [
    "DEFAULT_TASK_KIND",
    "TaskCatalog",
    "TaskSpec",
    "default_catalog",
    "AquacultureData",
    "BiologicalData",
    "EnvironmentalData",
    "InputMetadata",
    "TaskKind",
    "WaterQuality",
    "default_aquaculture_data",
]
