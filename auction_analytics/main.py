from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status

from .adapter import AnalyticsAdapter
from .admin import config as admin_config
from .admin import health as admin_health
from .admin import stats as admin_stats
from .config import AnalyticsConfig, get_analytics_config
from .transport import build_transport
from .validation import ConfigurationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    analytics_config = get_analytics_config()
    transport = build_transport(analytics_config.collector)
    adapter = AnalyticsAdapter.from_config(analytics_config, transport)
    try:
        adapter.enable(analytics_config.options)
    except ConfigurationError:
        logger.info("serving with analytics disabled")

    app.state.analytics_config = analytics_config
    app.state.adapter = adapter
    app.state.start_time = datetime.now(timezone.utc)

    yield

    adapter.disable()
    await transport.close()


app = FastAPI(
    title="Auction Analytics Aggregator",
    version="1.0.0",
    docs_url="/docs",
    lifespan=lifespan,
)

app.include_router(admin_health.router)
app.include_router(admin_stats.router)
app.include_router(admin_config.router)


# Dependency helpers ---------------------------------------------------------


def get_settings(request: Request) -> AnalyticsConfig:
    return request.app.state.analytics_config


def get_adapter(request: Request) -> AnalyticsAdapter:
    return request.app.state.adapter


# Routes ---------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root(settings: AnalyticsConfig = Depends(get_settings)) -> dict[str, Any]:
    return {
        "service": "auction-analytics",
        "version": app.version,
        "collector": {
            "backend": settings.collector.backend,
            "url": settings.collector.url,
        },
    }


@app.post("/analytics/events", tags=["events"], status_code=status.HTTP_202_ACCEPTED)
async def ingest_event(
    payload: dict[str, Any] = Body(...),
    adapter: AnalyticsAdapter = Depends(get_adapter),
) -> dict[str, Any]:
    event_type = payload.get("eventType")
    if not event_type or not isinstance(event_type, str):
        raise HTTPException(status_code=422, detail="eventType is required")
    if not adapter.enabled:
        raise HTTPException(status_code=503, detail="analytics is not enabled")
    handled = adapter.track(event_type, payload.get("args"))
    return {
        "status": "accepted" if handled else "ignored",
        "eventType": event_type,
    }
