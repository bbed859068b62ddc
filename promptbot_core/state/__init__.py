"""Conversation state and storage backends."""
from .bot_state import BotState, CachedBotState, ConversationState, StatePropertyAccessor
from .storage import MemoryStorage, Storage

__all__ = [
    "BotState",
    "CachedBotState",
    "ConversationState",
    "StatePropertyAccessor",
    "MemoryStorage",
    "Storage",
]
