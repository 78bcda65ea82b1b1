"""Event correlation: turns lifecycle events into collector reports."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..reports import (
    AuctionReport,
    EventCode,
    RequestType,
    build_lookup_key,
    make_ad_size,
    new_ad_unit_report,
    new_auction_report,
    new_bid_report,
)
from ..storage import AdIdEntry, AdIdLookup, TimeoutCache, TimeoutEntry, now_ms
from ..transport.dispatch import Dispatcher
from .models import (
    AdRenderFailedEvent,
    AuctionEndEvent,
    AuctionEvent,
    BidTimeoutEvent,
    BidWonEvent,
)

logger = logging.getLogger(__name__)


def _is_key(value: Any) -> bool:
    """Ad unit codes and bidder codes key the report; only non-empty strings qualify."""
    return isinstance(value, str) and bool(value)


def _is_size_pair(size: Any) -> bool:
    if not isinstance(size, (list, tuple)) or len(size) != 2:
        return False
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in size)


class EventCorrelator:
    """Correlates events that arrive out of order through two timed caches.

    Bid timeouts fire before auction end and are parked in ``timeout_cache``
    until the auction end for the same (auction, ad unit, bidder) consumes
    them. A won bid records its adId in ``ad_id_lookup`` so a later render
    failure, which only carries the adId, can be attributed.
    """

    def __init__(
        self,
        ad_id_lookup: AdIdLookup,
        timeout_cache: TimeoutCache,
        dispatcher: Dispatcher,
        *,
        site_id: int,
        prebid_version: str,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.ad_id_lookup = ad_id_lookup
        self.timeout_cache = timeout_cache
        self._dispatcher = dispatcher
        self._site_id = site_id
        self._prebid_version = prebid_version
        self._clock = clock
        self._handlers: dict[type, Callable[[Any], None]] = {
            AuctionEndEvent: self.on_auction_end,
            BidTimeoutEvent: self.on_bid_timeout,
            BidWonEvent: self.on_bid_won,
            AdRenderFailedEvent: self.on_ad_render_failed,
        }

    @property
    def handled_types(self) -> frozenset[type]:
        return frozenset(self._handlers)

    def handle(self, event: AuctionEvent) -> None:
        try:
            handler = self._handlers[type(event)]
        except KeyError as exc:
            raise TypeError(f"no handler for {type(event).__name__}") from exc
        handler(event)

    def _new_report(self, request_type: RequestType, auction_id: Any) -> AuctionReport:
        return new_auction_report(
            request_type,
            auction_id,
            site_id=self._site_id,
            prebid_version=self._prebid_version,
        )

    def on_bid_timeout(self, event: BidTimeoutEvent) -> None:
        if event.bids is None:
            logger.error("bid timeout args are not a list, nothing cached")
            return
        received = self._clock()
        for bid in event.bids:
            key = build_lookup_key(bid.auction_id, bid.ad_unit_code, bid.bidder)
            self.timeout_cache.put(key, TimeoutEntry(time_received=received))

    def on_bid_won(self, event: BidWonEvent) -> None:
        if not _is_key(event.bidder_code) or not _is_key(event.ad_unit_code) or not event.auction_id:
            logger.error("bid won is missing bidderCode, adUnitCode or auctionId; event dropped")
            return
        report = self._new_report(RequestType.BID_WON, event.auction_id)
        ad_unit = new_ad_unit_report()
        report.ad_units[event.ad_unit_code] = ad_unit

        bid = new_bid_report()
        bid.event_codes.append(EventCode.WIN)
        bid.ad_size = make_ad_size(event.width, event.height)
        bid.cpm = event.cpm
        bid.original_cpm = event.original_cpm
        bid.currency = event.currency
        bid.time_to_respond = event.time_to_respond
        ad_unit.bids[event.bidder_code] = bid

        if event.ad_id is not None:
            self.ad_id_lookup.put_if_absent(
                str(event.ad_id),
                AdIdEntry(
                    time_received=self._clock(),
                    bidder_code=event.bidder_code,
                    ad_unit_code=event.ad_unit_code,
                    auction_id=event.auction_id,
                ),
            )
        self._dispatcher.send(report)

    def on_ad_render_failed(self, event: AdRenderFailedEvent) -> None:
        ad_id = str(event.ad_id) if event.ad_id else None
        entry = self.ad_id_lookup.pop(ad_id) if ad_id else None
        if entry is None:
            logger.error("render failed without an adId matching a won bid; event dropped")
            return
        if not entry.bidder_code or not entry.ad_unit_code:
            logger.error("lookup entry for adId %s lacks bidderCode or adUnitCode; event dropped", ad_id)
            return

        report = self._new_report(RequestType.RENDER_FAILED, entry.auction_id)
        ad_unit = new_ad_unit_report()
        bid = new_bid_report()
        bid.event_codes.append(EventCode.RENDER_FAILED)
        bid.message = f"REASON: {event.reason}. MESSAGE: {event.message}"
        ad_unit.bids[entry.bidder_code] = bid
        report.ad_units[entry.ad_unit_code] = ad_unit
        self._dispatcher.send(report)

    def on_auction_end(self, event: AuctionEndEvent) -> None:
        auction_id = event.auction_id
        if not auction_id:
            logger.error("auction end has no auctionId; event dropped")
            return
        if event.ad_units is None:
            logger.error("auction end %s has no adUnits list; event dropped", auction_id)
            return

        report = self._new_report(RequestType.AUCTION_END, auction_id)
        for ad_unit in event.ad_units:
            if not _is_key(ad_unit.code):
                logger.info("skipping ad unit without a code in auction %s", auction_id)
                continue
            unit_report = new_ad_unit_report()
            for bidder in ad_unit.bidders:
                if not _is_key(bidder):
                    logger.info("skipping bid request without bidder on ad unit %s", ad_unit.code)
                    continue
                bid = new_bid_report()
                unit_report.bids[bidder] = bid
                timeout_key = build_lookup_key(auction_id, ad_unit.code, bidder)
                if self.timeout_cache.pop(timeout_key) is not None:
                    bid.event_codes.append(EventCode.TIMEOUT)
                    bid.time_to_respond = event.timeout

            for size in ad_unit.sizes or []:
                if not _is_size_pair(size):
                    logger.info("skipping malformed size %r on ad unit %s", size, ad_unit.code)
                    continue
                unit_report.sizes.append(make_ad_size(size[0], size[1]))
            report.ad_units[ad_unit.code] = unit_report

        if event.no_bids is None:
            logger.error("auction end %s has no noBids list", auction_id)
        else:
            for no_bid in event.no_bids:
                bid = report.find_bid(no_bid.get("adUnitCode"), no_bid.get("bidder"))
                if bid is None:
                    logger.info(
                        "no bid report for ad unit %s bidder %s in auction %s",
                        no_bid.get("adUnitCode"),
                        no_bid.get("bidder"),
                        auction_id,
                    )
                    continue
                bid.event_codes.append(EventCode.NO_BID)
                bid.time_to_respond = 0

        if event.bids_received is None:
            logger.error("auction end %s has no bidsReceived list", auction_id)
        else:
            for received in event.bids_received:
                bid = report.find_bid(received.get("adUnitCode"), received.get("bidderCode"))
                if bid is None:
                    logger.info(
                        "no bid report for ad unit %s bidder %s in auction %s",
                        received.get("adUnitCode"),
                        received.get("bidderCode"),
                        auction_id,
                    )
                    continue
                bid.event_codes.append(EventCode.BID)
                bid.time_to_respond = received.get("timeToRespond")
                bid.original_cpm = received.get("originalCpm")
                bid.cpm = received.get("cpm")
                bid.currency = received.get("currency")
                bid.ad_size = make_ad_size(received.get("width"), received.get("height"))

        self._dispatcher.send(report)
