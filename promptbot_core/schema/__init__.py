"""Activity schema shared by adapters, state and dialogs."""
from .activity import (
    Activity,
    ActivityTypes,
    ChannelAccount,
    ConversationAccount,
    ConversationReference,
)

__all__ = [
    "Activity",
    "ActivityTypes",
    "ChannelAccount",
    "ConversationAccount",
    "ConversationReference",
]
