"""Most recent request or error, for diagnostic views."""

from typing import Any

from pydantic import TypeAdapter

from ..tasks import TaskKind
from .models import DebugSnapshot, ErrorSnapshot, SuccessSnapshot

_snapshot_adapter = TypeAdapter(DebugSnapshot)


class DebugRecorder:
    """Holds a single last-write-wins debug snapshot."""

    def __init__(self) -> None:
        self._snapshot: SuccessSnapshot | ErrorSnapshot | None = None

    @property
    def snapshot(self) -> SuccessSnapshot | ErrorSnapshot | None:
        return self._snapshot

    def record_success(
        self,
        task_kind: TaskKind | None,
        input_data: dict[str, Any] | None,
        prompt: str,
        response: str,
        latency_ms: int,
    ) -> SuccessSnapshot:
        self._snapshot = SuccessSnapshot(
            task_kind=task_kind,
            input=input_data,
            prompt=prompt,
            response=response,
            latency_ms=latency_ms,
        )
        return self._snapshot

    def record_error(
        self,
        error: BaseException,
        task_kind: TaskKind | None = None,
        input_data: dict[str, Any] | None = None,
        prompt: str | None = None,
        partial_response: str = "",
    ) -> ErrorSnapshot:
        # Prefer the underlying cause of wrapped errors
        source = error.__cause__ or error
        self._snapshot = ErrorSnapshot(
            task_kind=task_kind,
            input=input_data,
            prompt=prompt,
            error_type=type(source).__name__,
            message=str(source),
            partial_response=partial_response,
        )
        return self._snapshot

    def to_json(self, indent: int = 2) -> str:
        """Snapshot as JSON ('{}' when nothing has been recorded)."""
        if self._snapshot is None:
            return "{}"
        return _snapshot_adapter.dump_json(self._snapshot, indent=indent).decode("utf-8")
