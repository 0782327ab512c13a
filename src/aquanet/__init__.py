"""
Aquanet: a streaming conversation client for aquaculture analysis.

Each module hides one design decision: task routing, prompt wording,
the model provider, the gateway shape, and conversation state.
"""

__version__ = "0.1.0"

from .config import DomainConfig, GatewayConfig
from .conversation import ConversationController, ControllerEvent, ControllerState, Message, Role
from .errors import (
    AlreadyActiveError,
    AquanetError,
    BackendFailureError,
    EmptyTaskAndQuestionError,
    SubmissionInProgressError,
    UnknownTaskKindError,
)
from .gateway import RoutedCall, StreamingCall, create_gateway
from .tasks import AquacultureData, TaskKind

__all__ = [
    "DomainConfig",
    "GatewayConfig",
    "ConversationController",
    "ControllerEvent",
    "ControllerState",
    "Message",
    "Role",
    "AlreadyActiveError",
    "AquanetError",
    "BackendFailureError",
    "EmptyTaskAndQuestionError",
    "SubmissionInProgressError",
    "UnknownTaskKindError",
    "RoutedCall",
    "StreamingCall",
    "create_gateway",
    "AquacultureData",
    "TaskKind",
]
