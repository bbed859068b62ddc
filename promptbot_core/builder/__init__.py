"""Turn handling: adapters, middleware and turn contexts."""
from .adapter import BotAdapter, BotCallback, Middleware, MiddlewareSet, NextHandler
from .turn_context import MessageFactory, TurnContext

__all__ = [
    "BotAdapter",
    "BotCallback",
    "Middleware",
    "MiddlewareSet",
    "NextHandler",
    "MessageFactory",
    "TurnContext",
]
