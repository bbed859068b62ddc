"""
Prompt Dialogs

Dialog wrappers around prompts: ask on begin, recognize on each reply,
re-ask on rejection, end with the recognized value on success.
"""

from typing import Any, Optional

from ..prompts import AgePrompt, BasePrompt, PromptValidator, Recognizer, TextPrompt
from ..schema import ActivityTypes
from .base import Dialog, DialogTurnResult, DialogTurnStatus, PromptOptions
from .context import DialogContext


class PromptDialog(Dialog):
    """Base dialog driving a prompt until it recognizes a value."""

    def __init__(self, dialog_id: str, prompt: BasePrompt):
        super().__init__(dialog_id)
        self.prompt = prompt

    async def begin_dialog(self, dc: DialogContext, options: Any = None) -> DialogTurnResult:
        if not isinstance(options, PromptOptions):
            options = PromptOptions(prompt=options) if isinstance(options, str) else PromptOptions()

        dc.active_dialog.state["options"] = options.to_dict()
        dc.active_dialog.state["attempts"] = 0

        if options.prompt:
            await self.prompt.prompt(dc.context, options.prompt)
        return DialogTurnResult(DialogTurnStatus.WAITING)

    async def continue_dialog(self, dc: DialogContext) -> DialogTurnResult:
        if dc.context.activity.type != ActivityTypes.MESSAGE:
            return DialogTurnResult(DialogTurnStatus.WAITING)

        result = await self.prompt.recognize(dc.context)
        if result.succeeded():
            return await dc.end_dialog(self.result_value(result))

        state = dc.active_dialog.state
        state["attempts"] = state.get("attempts", 0) + 1

        options = state.get("options") or {}
        reprompt = options.get("retry_prompt") or options.get("prompt")
        if reprompt:
            await self.prompt.prompt(dc.context, reprompt)
        return DialogTurnResult(DialogTurnStatus.WAITING)

    def result_value(self, result: Any) -> Any:
        return result


class TextPromptDialog(PromptDialog):
    """Asks for free text and returns the text."""

    def __init__(self, dialog_id: str, validator: Optional[PromptValidator] = None):
        super().__init__(dialog_id, TextPrompt(validator))

    def result_value(self, result: Any) -> Any:
        return result.value


class AgePromptDialog(PromptDialog):
    """Asks for an age and returns the NumberWithUnitResult."""

    def __init__(
        self,
        dialog_id: str,
        culture: str = "en-us",
        validator: Optional[PromptValidator] = None,
        recognizer: Optional[Recognizer] = None,
    ):
        super().__init__(dialog_id, AgePrompt(culture, validator, recognizer))


__all__ = ["PromptDialog", "TextPromptDialog", "AgePromptDialog"]
