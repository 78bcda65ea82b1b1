"""Fire-and-forget transports that deliver payloads to the collector."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx

from ..config import CollectorConfig

logger = logging.getLogger(__name__)

# Collector only accepts text/plain bodies.
_HEADERS = {"Content-Type": "text/plain"}


class Transport(Protocol):
    def send(self, body: bytes) -> None: ...

    async def close(self) -> None: ...


class LocalTransport:
    def send(self, body: bytes) -> None:
        logger.info("[local-collector] payload=%s", body.decode("utf-8"))

    async def close(self) -> None:
        return None


class HttpTransport:
    def __init__(
        self,
        url: str,
        *,
        timeout_ms: int = 2000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url:
            raise ValueError("collector url missing")
        self._url = url
        self._client = client or httpx.AsyncClient(timeout=timeout_ms / 1000)
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def send(self, body: bytes) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("no running event loop, dropping collector payload")
            return
        task = loop.create_task(self._post(body))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _post(self, body: bytes) -> None:
        try:
            response = await self._client.post(self._url, content=body, headers=_HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.debug("collector post failed: %s", exc)

    async def close(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self._client.aclose()


def build_transport(config: CollectorConfig) -> Transport:
    if config.backend == "local":
        return LocalTransport()
    if config.backend == "http":
        return HttpTransport(config.url, timeout_ms=config.timeout_ms)
    raise ValueError(f"unknown collector backend {config.backend}")
