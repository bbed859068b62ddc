"""Dialog stack orchestration and prompt dialogs."""
from .base import (
    Dialog,
    DialogInstance,
    DialogState,
    DialogTurnResult,
    DialogTurnStatus,
    PromptOptions,
)
from .context import DialogContext, DialogSet
from .prompts import AgePromptDialog, PromptDialog, TextPromptDialog

__all__ = [
    "Dialog",
    "DialogInstance",
    "DialogState",
    "DialogTurnResult",
    "DialogTurnStatus",
    "PromptOptions",
    "DialogContext",
    "DialogSet",
    "AgePromptDialog",
    "PromptDialog",
    "TextPromptDialog",
]
