"""Backend gateway: the controller's view of the model service."""

from .base import BackendGateway, ChunkCallback, RoutedCall, StreamingCall
from .factory import create_gateway
from .service import AquacultureService
from .streaming import StreamingAssistant

__all__ = [
    "BackendGateway",
    "ChunkCallback",
    "RoutedCall",
    "StreamingCall",
    "create_gateway",
    "AquacultureService",
    "StreamingAssistant",
]
