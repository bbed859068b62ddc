"""
Simple Prompt Bot

Asks the user for their name, then welcomes them by name using a
language generation template.
"""

import structlog

from ..builder import TurnContext
from ..dialogs import DialogSet, DialogState, DialogTurnStatus, PromptOptions, TextPromptDialog
from ..generation import LanguageGenerationResolver, TemplateResponses
from ..schema import Activity, ActivityTypes
from ..state import ConversationState


logger = structlog.get_logger()


class SimplePromptBot:
    """
    Bot handling one message turn at a time.

    The dialog stack lives in conversation state, so a new instance per
    turn is fine as long as the state and resolver are shared.
    """

    NAME_PROMPT_ID = "name"
    NAME_PROMPT_TEXT = "Please enter your name."

    def __init__(self, conversation_state: ConversationState, resolver: LanguageGenerationResolver):
        if conversation_state is None:
            raise TypeError("conversation_state is required")
        if resolver is None:
            raise TypeError("resolver is required")

        self.conversation_state = conversation_state
        self.resolver = resolver

        dialog_state = conversation_state.create_property("dialog_state", DialogState)
        self.dialogs = DialogSet(dialog_state)
        self.dialogs.add(TextPromptDialog(self.NAME_PROMPT_ID))

    async def on_turn(self, context: TurnContext) -> None:
        if context is None:
            raise TypeError("context is required")

        if context.activity.type != ActivityTypes.MESSAGE:
            return

        dc = await self.dialogs.create_context(context)
        results = await dc.continue_dialog()

        if results.status == DialogTurnStatus.EMPTY:
            await dc.prompt(self.NAME_PROMPT_ID, PromptOptions(prompt=self.NAME_PROMPT_TEXT))

        elif results.status == DialogTurnStatus.COMPLETE and results.result is not None:
            # user text is appended after resolution so it is never read as a template
            welcome = Activity(text=TemplateResponses.WELCOME_USER)
            await self.resolver.resolve(welcome, {"name": results.result})
            await context.send_activity(
                f"{welcome.text} Thank you, I have your name as '{results.result}'."
            )

            logger.info("name_collected", conversation_id=context.activity.conversation.id)

        await self.conversation_state.save_changes(context)


__all__ = ["SimplePromptBot"]
