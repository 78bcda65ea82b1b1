"""Collector report payloads."""

from __future__ import annotations

from .builder import (
    build_lookup_key,
    is_int,
    make_ad_size,
    new_ad_unit_report,
    new_auction_report,
    new_bid_report,
)
from .models import AdSize, AdUnitReport, AuctionReport, BidReport, EventCode, RequestType

__all__ = [
    "AdSize",
    "AdUnitReport",
    "AuctionReport",
    "BidReport",
    "EventCode",
    "RequestType",
    "build_lookup_key",
    "is_int",
    "make_ad_size",
    "new_ad_unit_report",
    "new_auction_report",
    "new_bid_report",
]
