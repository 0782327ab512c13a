"""Data models for the conversation controller.

Transcript messages, analytics samples, debug snapshots and controller
events. All models are frozen; the transcript replaces a message rather
than mutating it.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ..tasks import TaskKind


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ControllerState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class Message(BaseModel):
    """A single transcript entry.

    Serialized field names match the export format:
    role, content, timestamp, taskKind, inputSnapshot.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Role
    content: str = ""
    created_at: datetime = Field(default_factory=datetime.now, alias="timestamp")
    task_kind: TaskKind | None = Field(default=None, alias="taskKind")
    input_snapshot: dict[str, Any] | None = Field(default=None, alias="inputSnapshot")

    @field_serializer("created_at")
    def serialize_datetime(self, value: datetime) -> str:
        return value.isoformat()


class AnalyticsSample(BaseModel):
    """Latency of one completed request."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Display timestamp of the submission")
    latency_ms: int = Field(ge=0)


class SuccessSnapshot(BaseModel):
    """Debug record of the last successful call."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    task_kind: TaskKind | None = None
    input: dict[str, Any] | None = None
    prompt: str
    response: str
    latency_ms: int = Field(ge=0)
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorSnapshot(BaseModel):
    """Debug record of the last failed call."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    task_kind: TaskKind | None = None
    input: dict[str, Any] | None = None
    prompt: str | None = None
    error_type: str
    message: str
    partial_response: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


DebugSnapshot = Annotated[SuccessSnapshot | ErrorSnapshot, Field(discriminator="kind")]


class EventKind(str, Enum):
    SUBMITTED = "submitted"
    CHUNK = "chunk"
    COMPLETED = "completed"
    FAILED = "failed"
    RESET = "reset"


class ControllerEvent(BaseModel):
    """Notification sent to controller subscribers after a state change."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    message_index: int | None = Field(
        default=None,
        description="Transcript index of the assistant message concerned"
    )
    content: str | None = Field(default=None, description="Current assistant content")
    error: str | None = None
