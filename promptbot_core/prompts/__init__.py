"""Prompts, recognizers and the slot-filling turn controller."""
from .controller import (
    ConversationSlotState,
    PromptTurnController,
    PromptTurnOutcome,
    PromptTurnStatus,
)
from .prompt import AgePrompt, BasePrompt, NumberWithUnitPrompt, PromptValidator, TextPrompt
from .recognition import NumberWithUnitResult, RecognitionStatus, TextResult
from .recognizers import PatternAgeRecognizer, Recognizer, RemoteRecognizer, create_recognizer

__all__ = [
    "ConversationSlotState",
    "PromptTurnController",
    "PromptTurnOutcome",
    "PromptTurnStatus",
    "AgePrompt",
    "BasePrompt",
    "NumberWithUnitPrompt",
    "PromptValidator",
    "TextPrompt",
    "NumberWithUnitResult",
    "RecognitionStatus",
    "TextResult",
    "PatternAgeRecognizer",
    "Recognizer",
    "RemoteRecognizer",
    "create_recognizer",
]
