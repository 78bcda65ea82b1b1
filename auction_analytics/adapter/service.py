"""Analytics adapter lifecycle: enable, sample, track, sweep and disable."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Callable, Mapping

from ..config import DEFAULT_MAX_AGE_MS, DEFAULT_SWEEP_INTERVAL_MS, AnalyticsConfig
from ..events import EventCorrelator, parse_event
from ..reports import is_int
from ..storage import build_caches, now_ms
from ..transport import Dispatcher, Transport
from ..validation import ConfigurationError, validate_options

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 50


def resolve_sample_rate(value: Any) -> int:
    if is_int(value) and 0 <= float(value) <= 100:
        return int(float(value))
    return DEFAULT_SAMPLE_RATE


class AnalyticsAdapter:
    """Owns the correlation caches for one enable/disable cycle.

    ``enable`` must be called from inside a running event loop for the
    periodic sweep to be scheduled; handlers themselves are synchronous.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        prebid_version: str,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
        sweep_interval_ms: int = DEFAULT_SWEEP_INTERVAL_MS,
        clock: Callable[[], int] = now_ms,
        rng: random.Random | None = None,
    ) -> None:
        self.transport = transport
        self.dispatcher = Dispatcher(transport)
        self.prebid_version = prebid_version
        self.max_age_ms = max_age_ms
        self.sweep_interval_ms = sweep_interval_ms
        self._clock = clock
        self._rng = rng or random.Random()
        self.enabled = False
        self.do_sample = False
        self.sample_rate = DEFAULT_SAMPLE_RATE
        self.options: dict[str, Any] = {}
        self.ad_id_lookup, self.timeout_cache = build_caches()
        self.correlator: EventCorrelator | None = None
        self._sweep_task: asyncio.Task[None] | None = None

    @classmethod
    def from_config(cls, config: AnalyticsConfig, transport: Transport, **kwargs: Any) -> "AnalyticsAdapter":
        return cls(
            transport,
            prebid_version=config.host.prebid_version,
            max_age_ms=config.cache.max_age_ms,
            sweep_interval_ms=config.cache.sweep_interval_ms,
            **kwargs,
        )

    def enable(self, options: Mapping[str, Any] | None) -> None:
        if self.enabled:
            self.disable()
        try:
            validated = validate_options(options if options is not None else {})
        except ConfigurationError:
            logger.error("site_id is required, analytics stays disabled")
            raise

        self.options = validated
        self.sample_rate = resolve_sample_rate(validated.get("sampleRate"))
        logger.info("sample rate set to %d%%", self.sample_rate)
        self.do_sample = self._rng.random() * 100 < self.sample_rate

        self.ad_id_lookup, self.timeout_cache = build_caches()
        self.correlator = EventCorrelator(
            self.ad_id_lookup,
            self.timeout_cache,
            self.dispatcher,
            site_id=validated["site_id"],
            prebid_version=self.prebid_version,
            clock=self._clock,
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no running event loop, periodic cache sweep not scheduled")
        else:
            self._sweep_task = loop.create_task(self._sweep_loop())
        self.enabled = True

    def disable(self) -> None:
        if not self.enabled:
            return
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            self._sweep_task = None
        evicted = self.ad_id_lookup.clear() + self.timeout_cache.clear()
        logger.debug("disabled, evicted %d cached entries", evicted)
        self.correlator = None
        self.options = {}
        self.enabled = False

    def sweep_caches(self, now: int) -> int:
        evicted = self.ad_id_lookup.sweep(now, self.max_age_ms)
        evicted += self.timeout_cache.sweep(now, self.max_age_ms)
        return evicted

    async def _sweep_loop(self) -> None:
        interval = self.sweep_interval_ms / 1000
        while True:
            await asyncio.sleep(interval)
            evicted = self.sweep_caches(self._clock())
            if evicted:
                logger.info("cache sweep evicted %d stale entries", evicted)

    def track(self, event_type: str, args: Any) -> bool:
        """Route one host event; return True if a handler ran."""
        if not self.enabled or not self.do_sample or self.correlator is None:
            return False
        event = parse_event(event_type, args)
        if event is None:
            logger.debug("ignoring untracked event %s", event_type)
            return False
        logger.debug("track(): %s", event_type)
        self.correlator.handle(event)
        return True
