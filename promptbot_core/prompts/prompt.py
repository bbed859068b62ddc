"""
Prompts

A prompt sends a question to the user and, on a later turn, recognizes
the answer from the user's reply. An optional validator may reject a
successfully recognized value by changing the result's status.
"""
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from ..builder import TurnContext
from .recognition import NumberWithUnitResult, RecognitionStatus, TextResult
from .recognizers import Recognizer, create_recognizer

logger = structlog.get_logger()


PromptValidator = Callable[[TurnContext, Any], Union[None, Awaitable[None]]]


class BasePrompt:
    """Shared prompt/validate behaviour."""

    # fields a validator must leave untouched
    _protected_fields: tuple = ()

    def __init__(self, validator: Optional[PromptValidator] = None):
        self.validator = validator

    async def prompt(self, context: TurnContext, text: str, speak: Optional[str] = None) -> None:
        """
        Send the prompt text to the conversation.

        Does not wait for the reply; the answer arrives on a later turn.

        Raises:
            ValueError: if ``text`` is empty
            TransportError: if the message could not be delivered
        """
        if not text:
            raise ValueError("prompt text is required")

        await context.send_activity(text, speak=speak)

        logger.debug(
            "prompt_sent",
            prompt_type=type(self).__name__,
            conversation_id=context.activity.conversation.id if context.activity.conversation else None,
        )

    async def _validate(self, context: TurnContext, result: Any) -> None:
        if self.validator is None:
            return

        snapshot = {name: getattr(result, name) for name in self._protected_fields}

        outcome = self.validator(context, result)
        if inspect.isawaitable(outcome):
            await outcome

        changed = [name for name, value in snapshot.items() if getattr(result, name) != value]
        if changed:
            logger.warning("validator_modified_result", fields=changed)
            for name in changed:
                setattr(result, name, snapshot[name])

        if result.status != RecognitionStatus.SUCCESS:
            logger.info("prompt_value_rejected", prompt_type=type(self).__name__, status=result.status)


class NumberWithUnitPrompt(BasePrompt):
    """Prompt for a number with a unit, recognized for a given culture."""

    _protected_fields = ("text", "value", "unit")

    def __init__(
        self,
        culture: str,
        validator: Optional[PromptValidator] = None,
        recognizer: Optional[Recognizer] = None,
    ):
        super().__init__(validator)
        if not culture:
            raise ValueError("culture is required")
        self.culture = culture
        self.recognizer = recognizer or create_recognizer()

    async def recognize(self, context: TurnContext) -> NumberWithUnitResult:
        """
        Recognize the current turn's text.

        The validator only runs for successful recognitions.

        Raises:
            RecognizerUnavailable: if the recognizer could not be reached
        """
        text = context.activity.text or ""
        result = await self.recognizer.recognize(text, self.culture)

        if result.succeeded():
            await self._validate(context, result)

        logger.debug(
            "prompt_recognized",
            prompt_type=type(self).__name__,
            status=result.status,
            value=result.value,
            unit=result.unit,
        )
        return result


class AgePrompt(NumberWithUnitPrompt):
    """Prompt for an age such as "30 years" or "six months"."""


class TextPrompt(BasePrompt):
    """Prompt for free text; any non-blank reply is recognized."""

    _protected_fields = ("value",)

    async def recognize(self, context: TurnContext) -> TextResult:
        text = (context.activity.text or "").strip()
        if not text:
            return TextResult()

        result = TextResult(value=text, status=RecognitionStatus.SUCCESS)
        await self._validate(context, result)
        return result


__all__ = [
    "PromptValidator",
    "BasePrompt",
    "NumberWithUnitPrompt",
    "AgePrompt",
    "TextPrompt",
]
