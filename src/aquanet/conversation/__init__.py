"""Conversation state: transcript, streaming buffer, telemetry and the controller."""

from .accumulator import StreamAccumulator
from .analytics import SERIES_LABEL, AnalyticsRecorder, AnalyticsSummary
from .controller import (
    DEFAULT_USER_CONTENT,
    ConversationController,
    export_filename,
    parse_transcript,
)
from .debug import DebugRecorder
from .models import (
    AnalyticsSample,
    ControllerEvent,
    ControllerState,
    DebugSnapshot,
    ErrorSnapshot,
    EventKind,
    Message,
    Role,
    SuccessSnapshot,
)
from .store import ConversationStore

__all__ = [
    "StreamAccumulator",
    "SERIES_LABEL",
    "AnalyticsRecorder",
    "AnalyticsSummary",
    "DEFAULT_USER_CONTENT",
    "ConversationController",
    "export_filename",
    "parse_transcript",
    "DebugRecorder",
    "AnalyticsSample",
    "ControllerEvent",
    "ControllerState",
    "DebugSnapshot",
    "ErrorSnapshot",
    "EventKind",
    "Message",
    "Role",
    "SuccessSnapshot",
    "ConversationStore",
]
