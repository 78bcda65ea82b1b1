"""Helpers that produce the default report shapes and lookup keys."""

from __future__ import annotations

import math
from typing import Any

from .models import AdSize, AdUnitReport, AuctionReport, BidReport, RequestType

INVALID_DIMENSION = -1
_MISSING_KEY_PART = "undefined"


def is_int(value: Any) -> bool:
    """Return True when ``value`` converts to a finite integral number.

    Numeric strings such as ``"300"`` count; booleans and ``None`` do not.
    """
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return False
    return math.isfinite(number) and number.is_integer()


def make_ad_size(width: Any = None, height: Any = None) -> AdSize:
    w = int(float(width)) if is_int(width) else INVALID_DIMENSION
    h = int(float(height)) if is_int(height) else INVALID_DIMENSION
    return AdSize(w=w, h=h)


def build_lookup_key(auction_id: Any, ad_unit_code: Any, bidder_code: Any) -> str:
    parts = (auction_id, ad_unit_code, bidder_code)
    return "-".join(_MISSING_KEY_PART if part is None else str(part) for part in parts)


def new_auction_report(
    request_type: RequestType,
    auction_id: str | None,
    *,
    site_id: int,
    prebid_version: str,
) -> AuctionReport:
    return AuctionReport(
        request_type=RequestType(request_type),
        auction_id=auction_id,
        prebid_version=prebid_version,
        site_id=site_id,
    )


def new_ad_unit_report() -> AdUnitReport:
    return AdUnitReport()


def new_bid_report() -> BidReport:
    return BidReport()
