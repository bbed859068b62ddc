"""
Recognition results returned by prompts.

Statuses are open string codes: validators may assign codes beyond the
built-in ones without changing this module.
"""
from dataclasses import dataclass
from typing import Optional


class RecognitionStatus:
    """Built-in recognition status codes."""

    SUCCESS = "Success"
    NOT_RECOGNIZED = "NotRecognized"
    TOO_SMALL = "TooSmall"
    TOO_BIG = "TooBig"


def format_value(value: float) -> str:
    """Render a magnitude without loss; integral values drop the trailing ".0"."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass
class NumberWithUnitResult:
    """
    A number and its unit recognized from user text.

    ``value`` and ``unit`` are only set when the recognizer reported
    success. A validator may later change ``status`` to reject the value;
    the value and unit stay visible in that case.
    """

    text: Optional[str] = None
    value: Optional[float] = None
    unit: Optional[str] = None
    status: str = RecognitionStatus.NOT_RECOGNIZED

    def succeeded(self) -> bool:
        return self.status == RecognitionStatus.SUCCESS

    def __str__(self) -> str:
        if self.succeeded() and self.value is not None:
            return f"{format_value(self.value)} {self.unit}"
        return self.status

    @classmethod
    def not_recognized(cls, text: Optional[str] = None) -> "NumberWithUnitResult":
        return cls(text=text, status=RecognitionStatus.NOT_RECOGNIZED)


@dataclass
class TextResult:
    """Free text captured by a text prompt."""

    value: Optional[str] = None
    status: str = RecognitionStatus.NOT_RECOGNIZED

    def succeeded(self) -> bool:
        return self.status == RecognitionStatus.SUCCESS

    def __str__(self) -> str:
        if self.succeeded() and self.value is not None:
            return self.value
        return self.status


__all__ = ["RecognitionStatus", "format_value", "NumberWithUnitResult", "TextResult"]
