"""Operational stats endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from ..adapter import AnalyticsAdapter
from ..reports import RequestType

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_adapter(request: Request) -> AnalyticsAdapter:
    return request.app.state.adapter


@router.get("/stats")
async def stats(adapter: AnalyticsAdapter = Depends(_get_adapter)) -> dict[str, Any]:
    sent = adapter.dispatcher.sent
    return {
        "caches": {
            "ad_id_lookup": len(adapter.ad_id_lookup),
            "timeout_cache": len(adapter.timeout_cache),
        },
        "dispatched": {kind.value: sent.get(kind.value, 0) for kind in RequestType},
        "dispatched_total": sum(sent.values()),
        "dropped_total": sum(adapter.dispatcher.dropped.values()),
    }
