"""Auction lifecycle events and their correlation."""

from __future__ import annotations

from .handler import EventCorrelator
from .models import (
    AdRenderFailedEvent,
    AuctionEndEvent,
    AuctionEvent,
    BidTimeoutEvent,
    BidWonEvent,
    EventType,
    parse_event,
)

__all__ = [
    "AdRenderFailedEvent",
    "AuctionEndEvent",
    "AuctionEvent",
    "BidTimeoutEvent",
    "BidWonEvent",
    "EventCorrelator",
    "EventType",
    "parse_event",
]
