"""
Pydantic schemas for activities exchanged with a channel.

An activity is one inbound or outbound message (or event) in a
conversation.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityTypes:
    """Well-known activity types."""

    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    TYPING = "typing"
    END_OF_CONVERSATION = "endOfConversation"


class ChannelAccount(BaseModel):
    """A user or bot on a channel."""

    id: str
    name: Optional[str] = None


class ConversationAccount(BaseModel):
    """Conversation the activity belongs to."""

    id: str
    name: Optional[str] = None
    is_group: bool = False


class ConversationReference(BaseModel):
    """Enough information to address a conversation later."""

    model_config = ConfigDict(populate_by_name=True)

    activity_id: Optional[str] = None
    user: Optional[ChannelAccount] = None
    bot: Optional[ChannelAccount] = None
    conversation: ConversationAccount
    channel_id: str
    service_url: Optional[str] = None


class Activity(BaseModel):
    """A single activity on a conversation."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "type": "message",
                    "channel_id": "webchat",
                    "from": {"id": "user-1"},
                    "recipient": {"id": "bot"},
                    "conversation": {"id": "conv-abc"},
                    "text": "I am 30 years old",
                }
            ]
        },
    )

    type: str = ActivityTypes.MESSAGE
    id: Optional[str] = None
    timestamp: Optional[datetime] = None
    channel_id: str = Field("test", max_length=128)
    service_url: Optional[str] = None
    from_property: Optional[ChannelAccount] = Field(None, alias="from")
    recipient: Optional[ChannelAccount] = None
    conversation: Optional[ConversationAccount] = None
    reply_to_id: Optional[str] = None
    locale: Optional[str] = None
    text: Optional[str] = Field(None, max_length=10000)
    speak: Optional[str] = None
    value: Optional[Any] = None

    def create_reply(self, text: Optional[str] = None, locale: Optional[str] = None) -> "Activity":
        """Build a message addressed back to the sender of this activity."""
        return Activity(
            type=ActivityTypes.MESSAGE,
            id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            channel_id=self.channel_id,
            service_url=self.service_url,
            from_property=self.recipient,
            recipient=self.from_property,
            conversation=self.conversation,
            reply_to_id=self.id,
            locale=locale or self.locale,
            text=text or "",
        )

    def get_conversation_reference(self) -> ConversationReference:
        """Extract a conversation reference from this activity."""
        return ConversationReference(
            activity_id=self.id,
            user=self.from_property,
            bot=self.recipient,
            conversation=self.conversation or ConversationAccount(id=""),
            channel_id=self.channel_id,
            service_url=self.service_url,
        )


__all__ = [
    "ActivityTypes",
    "ChannelAccount",
    "ConversationAccount",
    "ConversationReference",
    "Activity",
]
