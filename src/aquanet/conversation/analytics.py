"""Response latency time series."""

from pydantic import BaseModel, Field

from .models import AnalyticsSample

SERIES_LABEL = "Response Time (ms)"


class AnalyticsSummary(BaseModel):
    count: int = Field(ge=0)
    mean_ms: float = Field(ge=0.0)
    min_ms: int = Field(ge=0)
    max_ms: int = Field(ge=0)


class AnalyticsRecorder:
    """Append-only series of (label, latency) samples."""

    def __init__(self) -> None:
        self._samples: list[AnalyticsSample] = []

    @property
    def samples(self) -> tuple[AnalyticsSample, ...]:
        return tuple(self._samples)

    def record(self, label: str, latency_ms: int) -> AnalyticsSample:
        """Append a sample.

        Raises:
            pydantic.ValidationError: If latency_ms is negative
        """
        sample = AnalyticsSample(label=label, latency_ms=latency_ms)
        self._samples.append(sample)
        return sample

    def labels(self) -> list[str]:
        return [s.label for s in self._samples]

    def values(self) -> list[int]:
        return [s.latency_ms for s in self._samples]

    def as_pairs(self) -> list[tuple[str, int]]:
        """(label, value) pairs for charting."""
        return [(s.label, s.latency_ms) for s in self._samples]

    def summary(self) -> AnalyticsSummary | None:
        """Aggregate statistics, or None when no samples exist."""
        if not self._samples:
            return None
        values = self.values()
        return AnalyticsSummary(
            count=len(values),
            mean_ms=sum(values) / len(values),
            min_ms=min(values),
            max_ms=max(values),
        )

    def clear(self) -> None:
        self._samples = []

    def __len__(self) -> int:
        return len(self._samples)
