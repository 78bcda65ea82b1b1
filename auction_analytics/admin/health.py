"""Admin health endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    start_time = getattr(request.app.state, "start_time", None)
    if start_time:
        uptime = int((datetime.now(timezone.utc) - start_time).total_seconds())
    else:
        uptime = 0
    adapter = request.app.state.adapter
    return {
        "status": "healthy" if adapter.enabled else "disabled",
        "uptime_seconds": uptime,
        "version": request.app.version,
        "enabled": adapter.enabled,
        "sampling": adapter.do_sample,
    }
