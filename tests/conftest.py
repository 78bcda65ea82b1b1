from __future__ import annotations

import random
from typing import Any
from unittest.mock import MagicMock

import pytest

from auction_analytics.events import EventCorrelator
from auction_analytics.storage import build_caches
from auction_analytics.transport import Dispatcher
from auction_analytics.transport.canonical_json import canonical_loads

SITE_ID = 108060
PREBID_VERSION = "1.2"
NOW_MS = 1_583_851_418_000


class FakeClock:
    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def sent_payloads(transport: MagicMock) -> list[dict[str, Any]]:
    return [canonical_loads(call.args[0]) for call in transport.send.call_args_list]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    """Transport double that records every body handed to send()."""
    return MagicMock()


@pytest.fixture
def caches():
    return build_caches()


@pytest.fixture
def correlator(caches, transport, clock):
    ad_id_lookup, timeout_cache = caches
    return EventCorrelator(
        ad_id_lookup,
        timeout_cache,
        Dispatcher(transport),
        site_id=SITE_ID,
        prebid_version=PREBID_VERSION,
        clock=clock,
    )


@pytest.fixture
def always_sample_rng():
    rng = random.Random()
    rng.random = lambda: 0.0
    return rng


@pytest.fixture
def sent(transport):
    """Return a callable that decodes everything dispatched so far."""
    return lambda: sent_payloads(transport)
