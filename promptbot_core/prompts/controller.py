"""
Prompt Turn Controller

Drives one slot-filling exchange across turns:

    AwaitingPrompt --(any turn)--> AwaitingInput
    AwaitingInput --(recognized and valid)--> Accepted
    AwaitingInput --(not recognized or rejected)--> AwaitingInput

The ``in_prompt`` flag that tells the two waiting states apart lives in
conversation state, so it survives between turns.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from ..builder import TurnContext
from ..state import BotState
from .prompt import BasePrompt

logger = structlog.get_logger()


class PromptTurnStatus(str, Enum):
    """Where the exchange stands after a turn."""

    AWAITING_PROMPT = "awaiting_prompt"
    AWAITING_INPUT = "awaiting_input"
    ACCEPTED = "accepted"


class ConversationSlotState(BaseModel):
    """Persisted per conversation."""

    in_prompt: bool = False


@dataclass
class PromptTurnOutcome:
    """Result of a single controller turn."""

    status: PromptTurnStatus
    result: Optional[Any] = None

    @property
    def accepted(self) -> bool:
        return self.status == PromptTurnStatus.ACCEPTED


class PromptTurnController:
    """
    Prompt, recognize, validate and accept a single value.

    On rejection the status is surfaced and ``in_prompt`` stays set, so
    the next turn is another attempt at input. The prompt text is only
    re-sent when ``retry_prompt`` is given.
    """

    def __init__(
        self,
        prompt: BasePrompt,
        conversation_state: BotState,
        prompt_text: str,
        retry_prompt: Optional[str] = None,
        property_name: str = "slot_state",
    ):
        if not prompt_text:
            raise ValueError("prompt_text is required")

        self.prompt = prompt
        self.conversation_state = conversation_state
        self.prompt_text = prompt_text
        self.retry_prompt = retry_prompt
        self._slot_state = conversation_state.create_property(property_name, ConversationSlotState)

    async def get_status(self, context: TurnContext) -> PromptTurnStatus:
        state = await self._slot_state.get(context, ConversationSlotState)
        return PromptTurnStatus.AWAITING_INPUT if state.in_prompt else PromptTurnStatus.AWAITING_PROMPT

    async def on_turn(self, context: TurnContext) -> PromptTurnOutcome:
        """
        Advance the exchange by one turn.

        Raises:
            TransportError: if the prompt could not be sent or state saved
            RecognizerUnavailable: if the recognizer could not be reached
        """
        state = await self._slot_state.get(context, ConversationSlotState)

        if not state.in_prompt:
            await self.prompt.prompt(context, self.prompt_text)
            # flag is only set once the send went through
            state.in_prompt = True
            await self.conversation_state.save_changes(context)
            return PromptTurnOutcome(status=PromptTurnStatus.AWAITING_INPUT)

        result = await self.prompt.recognize(context)

        if result.succeeded():
            logger.info("slot_accepted", prompt_type=type(self.prompt).__name__)
            return PromptTurnOutcome(status=PromptTurnStatus.ACCEPTED, result=result)

        if self.retry_prompt:
            await self.prompt.prompt(context, self.retry_prompt)

        return PromptTurnOutcome(status=PromptTurnStatus.AWAITING_INPUT, result=result)

    async def reset(self, context: TurnContext) -> None:
        """Return to AwaitingPrompt so the next turn prompts again."""
        await self._slot_state.set(context, ConversationSlotState())


__all__ = [
    "PromptTurnStatus",
    "ConversationSlotState",
    "PromptTurnOutcome",
    "PromptTurnController",
]
