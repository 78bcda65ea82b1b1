"""Correlation caches."""

from __future__ import annotations

from .timed_cache import AdIdEntry, CacheEntry, TimedCache, TimeoutEntry, now_ms

AdIdLookup = TimedCache[AdIdEntry]
TimeoutCache = TimedCache[TimeoutEntry]


def build_caches() -> tuple[AdIdLookup, TimeoutCache]:
    return TimedCache("ad_id_lookup"), TimedCache("timeout_cache")


__all__ = [
    "AdIdEntry",
    "AdIdLookup",
    "CacheEntry",
    "TimedCache",
    "TimeoutCache",
    "TimeoutEntry",
    "build_caches",
    "now_ms",
]
