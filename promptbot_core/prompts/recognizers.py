"""
Recognizers - Abstract interface and implementations for number-with-unit
recognition.

This module provides:
- Abstract Recognizer interface
- PatternAgeRecognizer: rule-based English age recognition, no network
- RemoteRecognizer: client for a hosted recognition endpoint
"""
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import Settings, get_settings
from ..errors import RecognizerUnavailable
from .recognition import NumberWithUnitResult, RecognitionStatus

logger = structlog.get_logger()


class Recognizer(ABC):
    """
    Abstract base class for recognizers.

    A recognizer returns a NumberWithUnitResult for every input. A
    no-match is a NotRecognized result, not an exception; only failing
    to reach the recognition capability raises RecognizerUnavailable.
    """

    @abstractmethod
    async def recognize(self, text: str, culture: str) -> NumberWithUnitResult:
        """
        Recognize a single number with unit in ``text``.

        Args:
            text: Raw user utterance
            culture: Locale identifier, e.g. "en-us"

        Returns:
            NumberWithUnitResult with status Success or NotRecognized
        """
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the recognizer can be used."""
        pass


_UNITS = ["zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine"]
_TEENS = [
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen",
    "sixteen", "seventeen", "eighteen", "nineteen",
]
_TENS = ["twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]

_WORD_VALUES: Dict[str, int] = {word: i for i, word in enumerate(_UNITS)}
_WORD_VALUES.update({word: 10 + i for i, word in enumerate(_TEENS)})
_WORD_VALUES.update({word: 20 + 10 * i for i, word in enumerate(_TENS)})

_NUMBER_WORDS = (
    rf"(?:{'|'.join(_TENS)})(?:[\s-](?:{'|'.join(_UNITS[1:])}))?"
    rf"|{'|'.join(_TEENS)}"
    rf"|{'|'.join(_UNITS)}"
)

_UNIT_NAMES: Dict[str, str] = {
    "year": "Year", "years": "Year", "yr": "Year", "yrs": "Year",
    "month": "Month", "months": "Month", "mo": "Month", "mos": "Month",
    "week": "Week", "weeks": "Week", "wk": "Week", "wks": "Week",
    "day": "Day", "days": "Day",
}


class PatternAgeRecognizer(Recognizer):
    """
    Rule-based age recognizer for English.

    Matches a number (digits, optionally with thousands separators, or
    words up to ninety-nine) followed by a time unit, e.g. "30 years",
    "fifteen-year", "1,000 days". Digits may follow letters ("abc30 years")
    but never part of a longer number. The leftmost match wins. Other
    cultures fall back to the English rules.
    """

    SUPPORTED_CULTURES = ("en",)

    def __init__(self) -> None:
        self._pattern = re.compile(
            rf"(?:(?<![\d.,])(?P<digits>\d{{1,3}}(?:,\d{{3}})+(?:\.\d+)?|\d+(?:\.\d+)?)"
            rf"|\b(?P<words>{_NUMBER_WORDS}))[\s-]*"
            rf"(?P<unit>{'|'.join(sorted(_UNIT_NAMES, key=len, reverse=True))})\b",
            re.IGNORECASE,
        )

    async def recognize(self, text: str, culture: str) -> NumberWithUnitResult:
        if not self._supports(culture):
            logger.debug("culture_fallback", culture=culture, fallback="en")

        match = self._pattern.search(text or "")
        if not match:
            return NumberWithUnitResult.not_recognized()

        value = self._parse_number(match.group("digits") or match.group("words"))
        unit = _UNIT_NAMES[match.group("unit").lower()]

        return NumberWithUnitResult(
            text=match.group(0),
            value=value,
            unit=unit,
            status=RecognitionStatus.SUCCESS,
        )

    async def is_available(self) -> bool:
        """Pattern recognizer is always available."""
        return True

    def _supports(self, culture: str) -> bool:
        language = (culture or "").lower().split("-")[0]
        return language in self.SUPPORTED_CULTURES

    @staticmethod
    def _parse_number(raw: str) -> float:
        try:
            return float(raw.replace(",", ""))
        except ValueError:
            pass
        return float(sum(_WORD_VALUES[w] for w in re.split(r"[\s-]+", raw.lower()) if w))


class RemoteRecognizer(Recognizer):
    """
    Client for a hosted number-with-unit recognition endpoint.

    Request:  POST {endpoint}/recognize/{kind}  {"text": ..., "culture": ...}
    Response: {"results": [{"text": ..., "value": ..., "unit": ...}, ...]}

    The first result is used; an empty list means no match.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str = "",
        kind: str = "age",
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not endpoint:
            raise ValueError("endpoint is required")
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.kind = kind
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=headers)
        return self._client

    async def recognize(self, text: str, culture: str) -> NumberWithUnitResult:
        client = self._get_client()
        url = f"{self.endpoint}/recognize/{self.kind}"

        try:
            response = await client.post(url, json={"text": text, "culture": culture})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("recognizer_request_failed", url=url, error=str(e))
            raise RecognizerUnavailable(
                "Recognizer endpoint could not be reached",
                details={"url": url, "error": str(e)},
            ) from e

        try:
            return self._parse_payload(payload)
        except (TypeError, ValueError) as e:
            logger.error("recognizer_response_invalid", url=url, error=str(e))
            raise RecognizerUnavailable(
                "Recognizer endpoint returned a malformed response",
                details={"url": url, "error": str(e)},
            ) from e

    @staticmethod
    def _parse_payload(payload: Any) -> NumberWithUnitResult:
        """
        Convert a response body into a result.

        Raises:
            TypeError: if the body does not have the documented shape
            ValueError: if the value is not numeric
        """
        if not isinstance(payload, dict):
            raise TypeError(f"expected an object, got {type(payload).__name__}")

        results = payload.get("results") or []
        if not isinstance(results, list):
            raise TypeError(f"'results' must be a list, got {type(results).__name__}")
        if not results:
            return NumberWithUnitResult.not_recognized()

        best: Dict[str, Any] = results[0]
        if not isinstance(best, dict):
            raise TypeError(f"result must be an object, got {type(best).__name__}")
        if best.get("value") is None or not best.get("unit"):
            return NumberWithUnitResult.not_recognized(text=best.get("text"))

        value = best["value"]
        if isinstance(value, bool):
            raise TypeError("'value' must be a number")

        return NumberWithUnitResult(
            text=best.get("text"),
            value=float(value),
            unit=str(best["unit"]),
            status=RecognitionStatus.SUCCESS,
        )

    async def is_available(self) -> bool:
        try:
            response = await self._get_client().get(f"{self.endpoint}/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("recognizer_unavailable", error=str(e))
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def create_recognizer(provider: Optional[str] = None, settings: Optional[Settings] = None) -> Recognizer:
    """
    Factory function to create a recognizer.

    Args:
        provider: "pattern" or "remote". If None, uses setting from config.
        settings: Settings to read endpoint details from; defaults to get_settings()

    Returns:
        Configured Recognizer instance
    """
    settings = settings or get_settings()
    provider = provider or settings.recognizer_provider

    if provider == "remote":
        if not settings.recognizer_endpoint:
            logger.warning("RECOGNIZER_ENDPOINT not set, falling back to pattern recognizer")
            return PatternAgeRecognizer()
        return RemoteRecognizer(
            endpoint=settings.recognizer_endpoint,
            api_key=settings.recognizer_api_key,
            timeout=settings.recognizer_timeout_seconds,
        )

    return PatternAgeRecognizer()


__all__ = [
    "Recognizer",
    "PatternAgeRecognizer",
    "RemoteRecognizer",
    "create_recognizer",
]
