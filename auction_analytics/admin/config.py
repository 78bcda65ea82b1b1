"""Expose the effective analytics configuration for debugging."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..adapter import AnalyticsAdapter
from ..config import AnalyticsConfig

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_config(request: Request) -> AnalyticsConfig:
    return request.app.state.analytics_config


def _get_adapter(request: Request) -> AnalyticsAdapter:
    return request.app.state.adapter


@router.get("/config")
async def config(
    request: Request,
    config: AnalyticsConfig = Depends(_get_config),
    adapter: AnalyticsAdapter = Depends(_get_adapter),
) -> dict:
    return {
        "site_id": adapter.options.get("site_id"),
        "sample_rate": adapter.sample_rate,
        "collector_backend": config.collector.backend,
        "collector_url": config.collector.url,
        "cache_max_age_ms": config.cache.max_age_ms,
        "sweep_interval_ms": config.cache.sweep_interval_ms,
        "prebid_version": config.host.prebid_version,
        "version": request.app.version,
    }
