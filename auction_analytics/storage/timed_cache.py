"""In-memory cache with time-based eviction for cross-event correlation."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry:
    time_received: int


@dataclass(frozen=True)
class AdIdEntry(CacheEntry):
    bidder_code: Optional[str] = None
    ad_unit_code: Optional[str] = None
    auction_id: Optional[str] = None


@dataclass(frozen=True)
class TimeoutEntry(CacheEntry):
    pass


EntryT = TypeVar("EntryT", bound=CacheEntry)


class TimedCache(Generic[EntryT]):
    """Key/value store whose entries age out from ``time_received``.

    Eviction only happens on :meth:`sweep`; there is no bound on the number
    of entries held between sweeps.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[str, EntryT] = {}

    def put(self, key: str, entry: EntryT) -> None:
        self._entries[key] = entry

    def put_if_absent(self, key: str, entry: EntryT) -> bool:
        if key in self._entries:
            return False
        self._entries[key] = entry
        return True

    def get(self, key: str) -> EntryT | None:
        return self._entries.get(key)

    def pop(self, key: str) -> EntryT | None:
        return self._entries.pop(key, None)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def sweep(self, now: int, max_age: int) -> int:
        """Drop every entry whose age is at least ``max_age``; return the count."""
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.time_received >= max_age
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("cache=%s evicted=%d remaining=%d", self.name, len(expired), len(self._entries))
        return len(expired)

    def clear(self) -> int:
        """Drop every entry regardless of age; return the count."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

