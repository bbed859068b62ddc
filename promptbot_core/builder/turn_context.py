"""
Turn Context

Wraps one inbound activity together with the adapter that delivered it.
Everything a bot does during a turn goes through the context.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import structlog

from ..schema import Activity, ActivityTypes

if TYPE_CHECKING:
    from .adapter import BotAdapter


logger = structlog.get_logger()


class MessageFactory:
    """Helpers for building outbound message activities."""

    @staticmethod
    def text(text: str, speak: Optional[str] = None) -> Activity:
        return Activity(type=ActivityTypes.MESSAGE, text=text, speak=speak)


class TurnContext:
    """
    Context for a single turn of a conversation.

    Holds the inbound activity, a scratch ``turn_state`` dict shared by
    middleware and the bot, and tracks whether anything was sent back.
    """

    def __init__(self, adapter: "BotAdapter", activity: Activity):
        if adapter is None:
            raise TypeError("adapter is required")
        if activity is None:
            raise TypeError("activity is required")

        self.adapter = adapter
        self.activity = activity
        self.turn_state: Dict[str, Any] = {}
        self._responded = False

    @property
    def responded(self) -> bool:
        """True once at least one activity was sent during this turn."""
        return self._responded

    async def send_activity(
        self,
        activity_or_text: Union[Activity, str],
        speak: Optional[str] = None,
    ) -> Activity:
        """
        Send a single activity (or plain text) to the conversation.

        Raises:
            TransportError: if the adapter could not deliver it
        """
        if isinstance(activity_or_text, str):
            activity = MessageFactory.text(activity_or_text, speak=speak)
        else:
            activity = activity_or_text

        sent = await self.send_activities([activity])
        return sent[0]

    async def send_activities(self, activities: List[Activity]) -> List[Activity]:
        """Address and send a batch of activities."""
        reference = self.activity.get_conversation_reference()
        outbound = [self.apply_conversation_reference(a, reference) for a in activities]

        sent = await self.adapter.send_activities(self, outbound)
        self._responded = True

        logger.debug(
            "activities_sent",
            conversation_id=reference.conversation.id,
            count=len(outbound),
        )
        return sent

    async def reply(self, text: str) -> Activity:
        """Alias for :meth:`send_activity` with plain text."""
        return await self.send_activity(text)

    @staticmethod
    def apply_conversation_reference(activity: Activity, reference) -> Activity:
        """Fill addressing fields of an outbound activity from a reference."""
        update: Dict[str, Any] = {
            "channel_id": reference.channel_id,
            "service_url": reference.service_url,
            "conversation": reference.conversation,
            "from_property": reference.bot,
            "recipient": reference.user,
        }
        if reference.activity_id:
            update["reply_to_id"] = reference.activity_id
        return activity.model_copy(update=update)


__all__ = ["MessageFactory", "TurnContext"]
