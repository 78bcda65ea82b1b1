"""Unit tests for the adapter enable/disable lifecycle and sampling."""

from __future__ import annotations

import asyncio
import logging
import random
from unittest.mock import MagicMock

import pytest

from auction_analytics.adapter import DEFAULT_SAMPLE_RATE, AnalyticsAdapter, resolve_sample_rate
from auction_analytics.storage import AdIdEntry, TimeoutEntry
from auction_analytics.validation import ConfigurationError

VALID_OPTIONS = {"site_id": 108060}
ALWAYS_SAMPLE_OPTIONS = {"site_id": 108060, "sampleRate": 100}
BID_TIMEOUT_ARGS = [
    {"bidId": "80882409358b8a8", "bidder": "conversant", "adUnitCode": "MedRect", "auctionId": "A1"},
    {"bidId": "9da4c107a6f24c8", "bidder": "conversant", "adUnitCode": "Leaderboard", "auctionId": "A1"},
]


@pytest.fixture
def adapter(transport, clock):
    return AnalyticsAdapter(transport, prebid_version="1.2", clock=clock)


class TestEnable:
    @pytest.mark.asyncio
    async def test_missing_site_id_raises_and_blocks_tracking(self, adapter, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ConfigurationError):
                adapter.enable({})
        assert "site_id is required" in caplog.text
        assert adapter.enabled is False
        assert adapter.track("bidTimeout", BID_TIMEOUT_ARGS) is False
        assert len(adapter.timeout_cache) == 0

    @pytest.mark.asyncio
    async def test_none_options_raise(self, adapter):
        with pytest.raises(ConfigurationError):
            adapter.enable(None)

    @pytest.mark.asyncio
    async def test_valid_config_logs_default_sample_rate(self, adapter, caplog):
        with caplog.at_level(logging.INFO):
            adapter.enable(VALID_OPTIONS)
        try:
            assert adapter.enabled is True
            assert adapter.sample_rate == DEFAULT_SAMPLE_RATE
            assert f"sample rate set to {DEFAULT_SAMPLE_RATE}%" in caplog.text
        finally:
            adapter.disable()

    @pytest.mark.asyncio
    async def test_sample_rate_100_always_samples(self, transport, clock):
        adapter = AnalyticsAdapter(transport, prebid_version="1.2", clock=clock, rng=random.Random(7))
        adapter.enable(ALWAYS_SAMPLE_OPTIONS)
        try:
            assert adapter.do_sample is True
            assert adapter.track("bidTimeout", BID_TIMEOUT_ARGS) is True
            assert len(adapter.timeout_cache) == 2
        finally:
            adapter.disable()

    @pytest.mark.asyncio
    async def test_sample_rate_0_never_samples(self, transport, clock, always_sample_rng):
        adapter = AnalyticsAdapter(transport, prebid_version="1.2", clock=clock, rng=always_sample_rng)
        adapter.enable({"site_id": 108060, "sampleRate": 0})
        try:
            assert adapter.do_sample is False
            assert adapter.track("bidTimeout", BID_TIMEOUT_ARGS) is False
            assert len(adapter.timeout_cache) == 0
        finally:
            adapter.disable()

    @pytest.mark.parametrize(
        "value, expected",
        [(0, 0), (100, 100), ("25", 25), (101, DEFAULT_SAMPLE_RATE), (-1, DEFAULT_SAMPLE_RATE),
         (12.5, DEFAULT_SAMPLE_RATE), ("foo", DEFAULT_SAMPLE_RATE), (None, DEFAULT_SAMPLE_RATE)],
    )
    def test_resolve_sample_rate(self, value, expected):
        assert resolve_sample_rate(value) == expected

    def test_enable_without_event_loop_skips_sweep(self, adapter):
        adapter.enable(ALWAYS_SAMPLE_OPTIONS)
        assert adapter.enabled is True
        adapter.disable()


class TestTrack:
    @pytest.mark.asyncio
    async def test_routes_events_to_correlator(self, transport, clock, always_sample_rng, sent):
        adapter = AnalyticsAdapter(transport, prebid_version="1.2", clock=clock, rng=always_sample_rng)
        adapter.enable(ALWAYS_SAMPLE_OPTIONS)
        try:
            adapter.track(
                "bidWon",
                {"bidderCode": "conversant", "adUnitCode": "div-0", "auctionId": "A1", "adId": "X", "cpm": 4},
            )
            assert len(sent()) == 1
            assert "X" in adapter.ad_id_lookup
            assert adapter.dispatcher.sent["bid_won"] == 1
        finally:
            adapter.disable()

    @pytest.mark.asyncio
    async def test_untracked_event_is_ignored(self, transport, clock, always_sample_rng):
        adapter = AnalyticsAdapter(transport, prebid_version="1.2", clock=clock, rng=always_sample_rng)
        adapter.enable(ALWAYS_SAMPLE_OPTIONS)
        try:
            assert adapter.track("bidRequested", {"auctionId": "A1"}) is False
            transport.send.assert_not_called()
        finally:
            adapter.disable()


class TestCacheLifecycle:
    @pytest.mark.asyncio
    async def test_sweep_task_evicts_stale_entries(self, transport, clock):
        adapter = AnalyticsAdapter(
            transport,
            prebid_version="1.2",
            clock=clock,
            max_age_ms=30000,
            sweep_interval_ms=10,
        )
        adapter.enable(VALID_OPTIONS)
        try:
            adapter.ad_id_lookup.put("keep", AdIdEntry(time_received=clock.now + 1))
            adapter.ad_id_lookup.put("delete", AdIdEntry(time_received=clock.now - 30000))
            adapter.timeout_cache.put("keep", TimeoutEntry(time_received=clock.now + 1))
            adapter.timeout_cache.put("delete", TimeoutEntry(time_received=clock.now - 30000))

            await asyncio.sleep(0.05)

            assert adapter.ad_id_lookup.keys() == ["keep"]
            assert adapter.timeout_cache.keys() == ["keep"]
        finally:
            adapter.disable()

    @pytest.mark.asyncio
    async def test_disable_clears_caches_and_is_idempotent(self, adapter, clock):
        adapter.enable(VALID_OPTIONS)
        adapter.ad_id_lookup.put("fresh", AdIdEntry(time_received=clock.now))
        adapter.timeout_cache.put("fresh", TimeoutEntry(time_received=clock.now))

        adapter.disable()
        assert len(adapter.ad_id_lookup) == 0
        assert len(adapter.timeout_cache) == 0
        assert adapter.enabled is False

        adapter.disable()
        assert len(adapter.ad_id_lookup) == 0
        assert len(adapter.timeout_cache) == 0

    @pytest.mark.asyncio
    async def test_disable_clears_entries_stamped_after_now(self, adapter, clock):
        """A wall clock that stepped back must not keep entries alive past disable."""
        adapter.enable(VALID_OPTIONS)
        adapter.ad_id_lookup.put("ahead", AdIdEntry(time_received=clock.now + 3_600_000))
        adapter.timeout_cache.put("ahead", TimeoutEntry(time_received=clock.now + 3_600_000))

        adapter.disable()

        assert len(adapter.ad_id_lookup) == 0
        assert len(adapter.timeout_cache) == 0
        assert adapter.options == {}

    @pytest.mark.asyncio
    async def test_disable_stops_sweep_task(self, adapter):
        adapter.enable(VALID_OPTIONS)
        task = adapter._sweep_task
        assert task is not None

        adapter.disable()
        await asyncio.sleep(0.01)

        assert task.cancelled()
        assert adapter._sweep_task is None

    @pytest.mark.asyncio
    async def test_reenable_starts_with_empty_caches(self, adapter, clock):
        adapter.enable(VALID_OPTIONS)
        adapter.timeout_cache.put("old", TimeoutEntry(time_received=clock.now))
        adapter.enable(VALID_OPTIONS)
        try:
            assert len(adapter.timeout_cache) == 0
        finally:
            adapter.disable()


def test_from_config_uses_cache_and_host_settings():
    from auction_analytics.config import build_config

    config = build_config(
        {
            "options": {"site_id": 1},
            "cache": {"max_age_ms": 1000, "sweep_interval_ms": 500},
            "host": {"prebid_version": "7.0.0"},
        }
    )
    adapter = AnalyticsAdapter.from_config(config, MagicMock())
    assert adapter.max_age_ms == 1000
    assert adapter.sweep_interval_ms == 500
    assert adapter.prebid_version == "7.0.0"
