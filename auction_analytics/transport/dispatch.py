"""Serialize reports and hand them to the transport."""

from __future__ import annotations

import logging
from collections import Counter

import orjson

from ..reports.models import AuctionReport
from .canonical_json import canonical_dumps
from .client import Transport

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self.sent: Counter[str] = Counter()
        self.dropped: Counter[str] = Counter()

    def send(self, report: AuctionReport) -> bool:
        """Serialize ``report`` and hand it off; return False if it was dropped."""
        try:
            body = canonical_dumps(report.to_dict())
        except orjson.JSONEncodeError as exc:
            self.dropped[report.request_type.value] += 1
            logger.error(
                "dropping unserializable %s report for auction %s: %s",
                report.request_type.value,
                report.auction_id,
                exc,
            )
            return False
        self._transport.send(body)
        self.sent[report.request_type.value] += 1
        logger.debug(
            "dispatched request_type=%s auction=%s bytes=%d",
            report.request_type.value,
            report.auction_id,
            len(body),
        )
        return True
