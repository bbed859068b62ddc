"""
Buffered Channel Adapter

HTTP-facing adapter: outbound activities produced during a turn are
collected and returned in the response body instead of being pushed to
a channel service. Turns for the same conversation run one at a time.
"""

import asyncio
from typing import Dict, List, Tuple

import structlog

from ..builder import BotAdapter, BotCallback, TurnContext
from ..schema import Activity


logger = structlog.get_logger()


BUFFER_KEY = "BufferedChannelAdapter.replies"


class BufferedChannelAdapter(BotAdapter):
    """Adapter that buffers replies per turn."""

    def __init__(self) -> None:
        super().__init__()
        # conversation key -> (lock, turns holding or waiting for it)
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @property
    def active_conversations(self) -> int:
        """Conversations with a turn running or queued."""
        return len(self._locks)

    @staticmethod
    def _conversation_key(activity: Activity) -> str:
        return f"{activity.channel_id}/{activity.conversation.id if activity.conversation else ''}"

    def _acquire_slot(self, key: str) -> asyncio.Lock:
        lock, users = self._locks.get(key) or (asyncio.Lock(), 0)
        self._locks[key] = (lock, users + 1)
        return lock

    def _release_slot(self, key: str) -> None:
        lock, users = self._locks[key]
        if users <= 1:
            del self._locks[key]
        else:
            self._locks[key] = (lock, users - 1)

    async def deliver(self, context: TurnContext, activities: List[Activity]) -> List[Activity]:
        context.turn_state.setdefault(BUFFER_KEY, []).extend(activities)
        return activities

    async def process_activity(self, activity: Activity, callback: BotCallback) -> TurnContext:
        key = self._conversation_key(activity)
        lock = self._acquire_slot(key)
        try:
            async with lock:
                return await super().process_activity(activity, callback)
        finally:
            self._release_slot(key)

    async def handle(self, activity: Activity, callback: BotCallback) -> List[Activity]:
        """Run a turn and return the activities it sent."""
        context = await self.process_activity(activity, callback)
        replies = context.turn_state.get(BUFFER_KEY, [])
        logger.info(
            "turn_processed",
            conversation_id=activity.conversation.id if activity.conversation else None,
            activity_type=activity.type,
            replies=len(replies),
        )
        return replies


__all__ = ["BufferedChannelAdapter"]
