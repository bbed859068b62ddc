"""
Storage - Abstract key/value interface and the in-memory implementation.

Stored items are JSON-compatible dicts keyed by a string.
"""
import copy
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import structlog

logger = structlog.get_logger()


class Storage(ABC):
    """
    Abstract base class for state storage backends.

    Implementations should raise StateStoreError when the backend
    cannot be reached.
    """

    @abstractmethod
    async def read(self, keys: List[str]) -> Dict[str, Any]:
        """
        Read items by key.

        Returns:
            Mapping of found keys to their items; missing keys are omitted
        """
        pass

    @abstractmethod
    async def write(self, changes: Dict[str, Any]) -> None:
        """Write (insert or replace) items."""
        pass

    @abstractmethod
    async def delete(self, keys: List[str]) -> None:
        """Delete items; unknown keys are ignored."""
        pass


class MemoryStorage(Storage):
    """
    In-memory storage for development and tests.

    Items are deep-copied on the way in and out so callers never share
    mutable state with the store. Entries expire ``ttl_seconds`` after
    their last write when a TTL is set. Expired entries are dropped when
    read, and writes sweep the whole store at most once per TTL period so
    abandoned conversations do not accumulate.
    """

    def __init__(self, ttl_seconds: Optional[int] = None) -> None:
        self._items: Dict[str, Tuple[Any, float]] = {}
        self._ttl = ttl_seconds or 0
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._items)

    def _expired(self, written_at: float) -> bool:
        return bool(self._ttl) and time.time() - written_at > self._ttl

    async def read(self, keys: List[str]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key in keys:
            entry = self._items.get(key)
            if entry is None:
                continue
            item, written_at = entry
            if self._expired(written_at):
                del self._items[key]
                logger.info("state_expired", key=key)
                continue
            result[key] = copy.deepcopy(item)
        return result

    def cleanup_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        if not self._ttl:
            return 0

        self._last_sweep = time.time()
        expired = [key for key, (_, written_at) in self._items.items() if self._expired(written_at)]
        for key in expired:
            del self._items[key]

        if expired:
            logger.info("state_cleanup", removed=len(expired), remaining=len(self._items))
        return len(expired)

    async def write(self, changes: Dict[str, Any]) -> None:
        now = time.time()
        if self._ttl and now - self._last_sweep >= self._ttl:
            self.cleanup_expired()
        for key, item in changes.items():
            self._items[key] = (copy.deepcopy(item), now)

    async def delete(self, keys: List[str]) -> None:
        for key in keys:
            self._items.pop(key, None)
