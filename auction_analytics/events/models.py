"""Typed views over the host framework's auction lifecycle events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class EventType(str, Enum):
    AUCTION_END = "auctionEnd"
    BID_TIMEOUT = "bidTimeout"
    BID_WON = "bidWon"
    AD_RENDER_FAILED = "adRenderFailed"


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list_or_none(value: Any) -> Optional[list[Any]]:
    return list(value) if isinstance(value, list) else None


@dataclass(frozen=True)
class TimedOutBid:
    auction_id: Any
    ad_unit_code: Any
    bidder: Any


@dataclass(frozen=True)
class BidTimeoutEvent:
    bids: Optional[list[TimedOutBid]]

    @classmethod
    def from_args(cls, args: Any) -> "BidTimeoutEvent":
        if not isinstance(args, list):
            return cls(bids=None)
        bids = [
            TimedOutBid(
                auction_id=item.get("auctionId"),
                ad_unit_code=item.get("adUnitCode"),
                bidder=item.get("bidder"),
            )
            for item in map(_mapping, args)
        ]
        return cls(bids=bids)


@dataclass(frozen=True)
class BidWonEvent:
    bidder_code: Any
    ad_unit_code: Any
    auction_id: Any
    ad_id: Any
    width: Any = None
    height: Any = None
    cpm: Any = None
    original_cpm: Any = None
    currency: Any = None
    time_to_respond: Any = None

    @classmethod
    def from_args(cls, args: Any) -> "BidWonEvent":
        data = _mapping(args)
        return cls(
            bidder_code=data.get("bidderCode"),
            ad_unit_code=data.get("adUnitCode"),
            auction_id=data.get("auctionId"),
            ad_id=data.get("adId"),
            width=data.get("width"),
            height=data.get("height"),
            cpm=data.get("cpm"),
            original_cpm=data.get("originalCpm"),
            currency=data.get("currency"),
            time_to_respond=data.get("timeToRespond"),
        )


@dataclass(frozen=True)
class AdRenderFailedEvent:
    reason: Any
    message: Any
    ad_id: Any = None

    @classmethod
    def from_args(cls, args: Any) -> "AdRenderFailedEvent":
        data = _mapping(args)
        return cls(reason=data.get("reason"), message=data.get("message"), ad_id=data.get("adId"))


@dataclass(frozen=True)
class AdUnitRequest:
    code: Any
    bidders: list[Any]
    sizes: Optional[list[Any]]

    @classmethod
    def from_args(cls, args: Any) -> "AdUnitRequest":
        data = _mapping(args)
        bids = data.get("bids") if isinstance(data.get("bids"), list) else []
        return cls(
            code=data.get("code"),
            bidders=[_mapping(bid).get("bidder") for bid in bids],
            sizes=_list_or_none(data.get("sizes")),
        )


@dataclass(frozen=True)
class AuctionEndEvent:
    """Auction end payload.

    ``None`` for a list field means the host did not send a list there, which
    the correlator treats differently from an empty list.
    """

    auction_id: Any
    timeout: Any
    ad_units: Optional[list[AdUnitRequest]]
    no_bids: Optional[list[dict[str, Any]]]
    bids_received: Optional[list[dict[str, Any]]]

    @classmethod
    def from_args(cls, args: Any) -> "AuctionEndEvent":
        data = _mapping(args)
        ad_units = _list_or_none(data.get("adUnits"))
        no_bids = _list_or_none(data.get("noBids"))
        bids_received = _list_or_none(data.get("bidsReceived"))
        return cls(
            auction_id=data.get("auctionId"),
            timeout=data.get("timeout"),
            ad_units=[AdUnitRequest.from_args(unit) for unit in ad_units] if ad_units is not None else None,
            no_bids=[_mapping(item) for item in no_bids] if no_bids is not None else None,
            bids_received=[_mapping(item) for item in bids_received] if bids_received is not None else None,
        )


AuctionEvent = Union[AuctionEndEvent, BidTimeoutEvent, BidWonEvent, AdRenderFailedEvent]

EVENT_TYPES: dict[EventType, type] = {
    EventType.AUCTION_END: AuctionEndEvent,
    EventType.BID_TIMEOUT: BidTimeoutEvent,
    EventType.BID_WON: BidWonEvent,
    EventType.AD_RENDER_FAILED: AdRenderFailedEvent,
}


def parse_event(event_type: str, args: Any) -> AuctionEvent | None:
    """Build the typed event for ``event_type`` or return None if it is not tracked."""
    try:
        kind = EventType(event_type)
    except ValueError:
        return None
    return EVENT_TYPES[kind].from_args(args)
