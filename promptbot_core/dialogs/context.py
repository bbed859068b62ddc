"""
Dialog Set and Dialog Context

The dialog set registers dialogs by id; a dialog context binds the set
to one turn and the persisted dialog stack.
"""

from typing import Any, Dict, Optional

import structlog

from ..builder import TurnContext
from ..errors import DialogError
from ..state import StatePropertyAccessor
from .base import (
    Dialog,
    DialogInstance,
    DialogState,
    DialogTurnResult,
    DialogTurnStatus,
    PromptOptions,
)


logger = structlog.get_logger()


class DialogSet:
    """Collection of dialogs sharing one persisted stack."""

    def __init__(self, dialog_state: StatePropertyAccessor):
        if dialog_state is None:
            raise TypeError("dialog_state accessor is required")
        self._dialog_state = dialog_state
        self._dialogs: Dict[str, Dialog] = {}

    def add(self, dialog: Dialog) -> "DialogSet":
        if dialog.id in self._dialogs:
            raise DialogError(f"Dialog '{dialog.id}' is already registered")
        self._dialogs[dialog.id] = dialog
        return self

    def find(self, dialog_id: str) -> Optional[Dialog]:
        return self._dialogs.get(dialog_id)

    async def create_context(self, context: TurnContext) -> "DialogContext":
        state = await self._dialog_state.get(context, DialogState)
        return DialogContext(self, context, state)


class DialogContext:
    """Runs dialogs for the current turn."""

    def __init__(self, dialogs: DialogSet, context: TurnContext, state: DialogState):
        self.dialogs = dialogs
        self.context = context
        self._state = state

    @property
    def stack(self):
        return self._state.dialog_stack

    @property
    def active_dialog(self) -> Optional[DialogInstance]:
        return self.stack[0] if self.stack else None

    async def begin_dialog(self, dialog_id: str, options: Any = None) -> DialogTurnResult:
        dialog = self.dialogs.find(dialog_id)
        if dialog is None:
            raise DialogError(f"Dialog '{dialog_id}' not found", details={"dialog_id": dialog_id})

        self.stack.insert(0, DialogInstance(id=dialog_id))
        logger.debug("dialog_started", dialog_id=dialog_id, depth=len(self.stack))
        return await dialog.begin_dialog(self, options)

    async def prompt(self, dialog_id: str, options: PromptOptions) -> DialogTurnResult:
        """Start a prompt dialog."""
        if options is None:
            raise TypeError("options are required for a prompt")
        return await self.begin_dialog(dialog_id, options)

    async def continue_dialog(self) -> DialogTurnResult:
        instance = self.active_dialog
        if instance is None:
            return DialogTurnResult(DialogTurnStatus.EMPTY)

        dialog = self._lookup(instance.id)
        return await dialog.continue_dialog(self)

    async def end_dialog(self, result: Any = None) -> DialogTurnResult:
        if self.stack:
            ended = self.stack.pop(0)
            logger.debug("dialog_ended", dialog_id=ended.id)

        instance = self.active_dialog
        if instance is not None:
            return await self._lookup(instance.id).resume_dialog(self, result)

        return DialogTurnResult(DialogTurnStatus.COMPLETE, result)

    async def cancel_all_dialogs(self) -> DialogTurnResult:
        if not self.stack:
            return DialogTurnResult(DialogTurnStatus.EMPTY)

        self.stack.clear()
        logger.info("dialogs_cancelled")
        return DialogTurnResult(DialogTurnStatus.CANCELLED)

    def _lookup(self, dialog_id: str) -> Dialog:
        dialog = self.dialogs.find(dialog_id)
        if dialog is None:
            raise DialogError(
                f"Active dialog '{dialog_id}' is not registered in this dialog set",
                details={"dialog_id": dialog_id},
            )
        return dialog


__all__ = ["DialogSet", "DialogContext"]
