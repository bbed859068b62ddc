"""
Dialogs - Base Classes and Types

A dialog is a multi-turn conversational unit. Active dialogs form a
stack persisted in conversation state; the top of the stack receives
each new turn.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .context import DialogContext


class DialogTurnStatus(str, Enum):
    """Outcome of running the dialog stack for a turn."""

    EMPTY = "empty"          # No dialog on the stack
    WAITING = "waiting"      # Active dialog waits for the user
    COMPLETE = "complete"    # Last dialog ended this turn
    CANCELLED = "cancelled"  # Stack was cancelled


@dataclass
class DialogTurnResult:
    """Status plus the value returned by a completed dialog."""

    status: DialogTurnStatus
    result: Any = None


@dataclass
class PromptOptions:
    """Texts used by prompt dialogs."""

    prompt: Optional[str] = None
    retry_prompt: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"prompt": self.prompt, "retry_prompt": self.retry_prompt}


class DialogInstance(BaseModel):
    """One entry on the dialog stack."""

    id: str
    state: Dict[str, Any] = Field(default_factory=dict)


class DialogState(BaseModel):
    """Persisted dialog stack, top of stack first."""

    dialog_stack: List[DialogInstance] = Field(default_factory=list)


class Dialog(ABC):
    """Abstract base class for dialogs."""

    def __init__(self, dialog_id: str):
        if not dialog_id:
            raise ValueError("dialog_id is required")
        self.id = dialog_id

    @abstractmethod
    async def begin_dialog(self, dc: "DialogContext", options: Any = None) -> DialogTurnResult:
        """Called when the dialog is pushed onto the stack."""
        pass

    async def continue_dialog(self, dc: "DialogContext") -> DialogTurnResult:
        """Called for each turn while the dialog is active."""
        return await dc.end_dialog()

    async def resume_dialog(self, dc: "DialogContext", result: Any = None) -> DialogTurnResult:
        """Called when a child dialog ended and this dialog is on top again."""
        return await dc.end_dialog(result)


__all__ = [
    "DialogTurnStatus",
    "DialogTurnResult",
    "PromptOptions",
    "DialogInstance",
    "DialogState",
    "Dialog",
]
