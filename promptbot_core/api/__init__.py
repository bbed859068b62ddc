"""HTTP hosting for bots."""
from .adapter import BufferedChannelAdapter
from .app import create_app
from .schemas import ErrorResponse, HealthResponse, TurnResponse

__all__ = [
    "BufferedChannelAdapter",
    "create_app",
    "ErrorResponse",
    "HealthResponse",
    "TurnResponse",
]
