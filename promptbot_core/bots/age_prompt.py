"""
Age Prompt Bot

Asks for an age and echoes it back as "<value> <unit>". Rejected or
unrecognized answers are answered with the recognition status, and the
next message is treated as another attempt.
"""

from typing import Optional

import structlog

from ..builder import TurnContext
from ..prompts import (
    AgePrompt,
    NumberWithUnitResult,
    PromptTurnController,
    Recognizer,
    RecognitionStatus,
)
from ..schema import ActivityTypes
from ..state import ConversationState


logger = structlog.get_logger()


class AgePromptBot:
    """Slot-filling bot for a single age value."""

    PROMPT_TEXT = "How old are you?"

    def __init__(
        self,
        conversation_state: ConversationState,
        culture: str = "en-us",
        recognizer: Optional[Recognizer] = None,
        min_age: Optional[float] = None,
        max_age: Optional[float] = None,
    ):
        self.conversation_state = conversation_state
        self.min_age = min_age
        self.max_age = max_age
        self.controller = PromptTurnController(
            AgePrompt(culture, validator=self._validate, recognizer=recognizer),
            conversation_state,
            self.PROMPT_TEXT,
            property_name="age_slot",
        )

    def _validate(self, context: TurnContext, result: NumberWithUnitResult) -> None:
        if self.min_age is not None and result.value < self.min_age:
            result.status = RecognitionStatus.TOO_SMALL
        elif self.max_age is not None and result.value > self.max_age:
            result.status = RecognitionStatus.TOO_BIG

    async def on_turn(self, context: TurnContext) -> None:
        if context.activity.type != ActivityTypes.MESSAGE:
            return

        outcome = await self.controller.on_turn(context)
        if outcome.result is not None:
            await context.send_activity(str(outcome.result))

        if outcome.accepted:
            logger.info("age_collected", value=outcome.result.value, unit=outcome.result.unit)
            await self.controller.reset(context)

        await self.conversation_state.save_changes(context)


__all__ = ["AgePromptBot"]
