"""
Bot State

Per-conversation state loaded at the start of a turn and written back
after the bot finished handling it. Nothing is persisted for a turn that
raised or was cancelled.
"""
import hashlib
import json
from abc import abstractmethod
from typing import Any, Callable, Dict, Optional, Type

import structlog
from pydantic import BaseModel

from ..builder import Middleware, NextHandler, TurnContext
from ..errors import StateStoreError
from .storage import Storage

logger = structlog.get_logger()


def _serialize(value: Any) -> Any:
    """Convert state values into JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


class CachedBotState:
    """State dict for one turn plus a hash of what was loaded."""

    def __init__(self, state: Optional[Dict[str, Any]] = None) -> None:
        self.state: Dict[str, Any] = state or {}
        self.hash = self.compute_hash()

    def serialized(self) -> Dict[str, Any]:
        return _serialize(self.state)

    def compute_hash(self) -> str:
        payload = json.dumps(self.serialized(), sort_keys=True, default=str)
        return hashlib.sha256(payload.encode()).hexdigest()

    def is_changed(self) -> bool:
        return self.hash != self.compute_hash()


class StatePropertyAccessor:
    """
    Named property inside a BotState.

    When ``model`` is given, stored dicts are validated back into that
    pydantic model on first access in a turn.
    """

    def __init__(self, bot_state: "BotState", name: str, model: Optional[Type[BaseModel]] = None):
        self.bot_state = bot_state
        self.name = name
        self.model = model

    async def get(self, context: TurnContext, default_factory: Optional[Callable[[], Any]] = None) -> Any:
        await self.bot_state.load(context)
        state = self.bot_state.get(context)

        if self.name in state:
            value = state[self.name]
            if self.model is not None and isinstance(value, dict):
                value = self.model.model_validate(value)
                state[self.name] = value
            return value

        if default_factory is None:
            return None

        value = default_factory()
        state[self.name] = value
        return value

    async def set(self, context: TurnContext, value: Any) -> None:
        await self.bot_state.load(context)
        self.bot_state.get(context)[self.name] = value

    async def delete(self, context: TurnContext) -> None:
        await self.bot_state.load(context)
        self.bot_state.get(context).pop(self.name, None)


class BotState(Middleware):
    """
    Base class for state scoped to some part of a turn's activity.

    Used as middleware it loads state before the bot runs and saves it
    after the bot returns.
    """

    def __init__(self, storage: Storage, context_service_key: str):
        if storage is None:
            raise TypeError("storage is required")
        self._storage = storage
        self._context_service_key = context_service_key

    @abstractmethod
    def get_storage_key(self, context: TurnContext) -> str:
        """Storage key for the state of this turn."""
        pass

    def create_property(self, name: str, model: Optional[Type[BaseModel]] = None) -> StatePropertyAccessor:
        if not name:
            raise ValueError("property name is required")
        return StatePropertyAccessor(self, name, model)

    def get(self, context: TurnContext) -> Dict[str, Any]:
        """Raw state dict for the turn; requires :meth:`load` first."""
        cached = context.turn_state.get(self._context_service_key)
        if cached is None:
            raise RuntimeError(f"{type(self).__name__} was not loaded for this turn")
        return cached.state

    async def load(self, context: TurnContext, force: bool = False) -> None:
        cached = context.turn_state.get(self._context_service_key)
        if cached is not None and not force:
            return

        key = self.get_storage_key(context)
        try:
            items = await self._storage.read([key])
        except StateStoreError:
            raise
        except Exception as e:
            raise StateStoreError(f"Failed to read state '{key}'", details={"error": str(e)}) from e

        context.turn_state[self._context_service_key] = CachedBotState(items.get(key))

    async def save_changes(self, context: TurnContext, force: bool = False) -> None:
        cached = context.turn_state.get(self._context_service_key)
        if cached is None or not (force or cached.is_changed()):
            return

        key = self.get_storage_key(context)
        try:
            await self._storage.write({key: cached.serialized()})
        except StateStoreError:
            raise
        except Exception as e:
            raise StateStoreError(f"Failed to write state '{key}'", details={"error": str(e)}) from e

        cached.hash = cached.compute_hash()
        logger.debug("state_saved", key=key)

    async def clear(self, context: TurnContext) -> None:
        """Reset the turn's state; persisted on the next save."""
        context.turn_state[self._context_service_key] = CachedBotState()
        # force a write even if the stored state was already empty
        context.turn_state[self._context_service_key].hash = ""

    async def delete(self, context: TurnContext) -> None:
        """Remove the state from storage and the turn cache."""
        context.turn_state.pop(self._context_service_key, None)
        key = self.get_storage_key(context)
        try:
            await self._storage.delete([key])
        except StateStoreError:
            raise
        except Exception as e:
            raise StateStoreError(f"Failed to delete state '{key}'", details={"error": str(e)}) from e

    async def on_turn(self, context: TurnContext, next_handler: NextHandler) -> None:
        await self.load(context)
        await next_handler()
        await self.save_changes(context)


class ConversationState(BotState):
    """State scoped to a single conversation on a channel."""

    def __init__(self, storage: Storage):
        super().__init__(storage, "ConversationState")

    def get_storage_key(self, context: TurnContext) -> str:
        activity = context.activity
        if not activity.channel_id:
            raise ValueError("activity.channel_id is required for conversation state")
        if activity.conversation is None or not activity.conversation.id:
            raise ValueError("activity.conversation.id is required for conversation state")
        return f"{activity.channel_id}/conversations/{activity.conversation.id}"


__all__ = [
    "CachedBotState",
    "StatePropertyAccessor",
    "BotState",
    "ConversationState",
]
