"""Report structures sent to the analytics collector."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Optional


class RequestType(str, Enum):
    AUCTION_END = "auction_end"
    BID_WON = "bid_won"
    RENDER_FAILED = "render_failed"


class EventCode(IntEnum):
    WIN = 10
    BID = 20
    NO_BID = 30
    TIMEOUT = 40
    RENDER_FAILED = 50


@dataclass(frozen=True)
class AdSize:
    w: int
    h: int

    def to_dict(self) -> dict[str, int]:
        return {"w": self.w, "h": self.h}


@dataclass
class BidReport:
    event_codes: list[EventCode] = field(default_factory=list)
    ad_size: Optional[AdSize] = None
    cpm: Optional[float] = None
    original_cpm: Optional[float] = None
    currency: Optional[str] = None
    time_to_respond: Optional[int] = None
    message: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"eventCodes": [int(code) for code in self.event_codes]}
        optional = {
            "adSize": self.ad_size.to_dict() if self.ad_size else None,
            "cpm": self.cpm,
            "originalCpm": self.original_cpm,
            "currency": self.currency,
            "timeToRespond": self.time_to_respond,
            "message": self.message,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})
        return payload


@dataclass
class AdUnitReport:
    sizes: list[AdSize] = field(default_factory=list)
    bids: dict[str, BidReport] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sizes": [size.to_dict() for size in self.sizes],
            "bids": {bidder: bid.to_dict() for bidder, bid in self.bids.items()},
        }


@dataclass
class AuctionReport:
    request_type: RequestType
    auction_id: Optional[str]
    prebid_version: str
    site_id: int
    ad_units: dict[str, AdUnitReport] = field(default_factory=dict)

    def find_bid(self, ad_unit_code: Any, bidder_code: Any) -> BidReport | None:
        ad_unit = self.ad_units.get(ad_unit_code) if isinstance(ad_unit_code, str) else None
        if ad_unit is None or not isinstance(bidder_code, str):
            return None
        return ad_unit.bids.get(bidder_code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestType": self.request_type.value,
            "auction": {
                "auctionId": self.auction_id,
                "preBidVersion": self.prebid_version,
                "sid": self.site_id,
            },
            "adUnits": {code: unit.to_dict() for code, unit in self.ad_units.items()},
        }
