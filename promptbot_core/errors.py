"""
Exception hierarchy for the prompt bot framework.

Expected recognition outcomes (NotRecognized, validator rejections) are
returned as data on results. Only collaborator failures are raised.
"""
from typing import Any, Dict, Optional


class BotError(Exception):
    """Base exception for framework errors."""

    code = "BOT_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportError(BotError):
    """Outbound activity could not be delivered."""

    code = "TRANSPORT_ERROR"


class StateStoreError(TransportError):
    """Conversation state could not be read or persisted."""

    code = "STATE_STORE_ERROR"


class RecognizerUnavailable(BotError):
    """The recognizer collaborator could not be reached."""

    code = "RECOGNIZER_UNAVAILABLE"


class LanguageGenerationError(BotError):
    """The language generation service failed to resolve an activity."""

    code = "LANGUAGE_GENERATION_ERROR"


class DialogError(BotError):
    """Invalid dialog operation (unknown dialog id, empty stack)."""

    code = "DIALOG_ERROR"


__all__ = [
    "BotError",
    "TransportError",
    "StateStoreError",
    "RecognizerUnavailable",
    "LanguageGenerationError",
    "DialogError",
]
