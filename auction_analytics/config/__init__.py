"""Configuration helpers for the analytics aggregator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

_DEFAULT_CONFIG = Path(__file__).resolve().parent / "analytics.yaml"

DEFAULT_COLLECTOR_URL = "https://web.hb.ad.cpe.dotomi.com/cvx/event/prebidanalytics"
DEFAULT_MAX_AGE_MS = 30000
DEFAULT_SWEEP_INTERVAL_MS = 30000


@dataclass(frozen=True)
class CollectorConfig:
    backend: str
    url: str
    timeout_ms: int


@dataclass(frozen=True)
class CacheConfig:
    max_age_ms: int
    sweep_interval_ms: int


@dataclass(frozen=True)
class HostConfig:
    prebid_version: str


@dataclass(frozen=True)
class AnalyticsConfig:
    options: Mapping[str, Any]
    collector: CollectorConfig
    cache: CacheConfig
    host: HostConfig


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return yaml.safe_load(path.read_text()) or {}


def build_config(data: Mapping[str, Any]) -> AnalyticsConfig:
    collector = data.get("collector", {}) or {}
    cache = data.get("cache", {}) or {}
    host = data.get("host", {}) or {}
    return AnalyticsConfig(
        options=dict(data.get("options") or {}),
        collector=CollectorConfig(
            backend=str(collector.get("backend", "http")),
            url=str(collector.get("url", DEFAULT_COLLECTOR_URL)),
            timeout_ms=int(collector.get("timeout_ms", 2000)),
        ),
        cache=CacheConfig(
            max_age_ms=int(cache.get("max_age_ms", DEFAULT_MAX_AGE_MS)),
            sweep_interval_ms=int(cache.get("sweep_interval_ms", DEFAULT_SWEEP_INTERVAL_MS)),
        ),
        host=HostConfig(prebid_version=str(host.get("prebid_version", ""))),
    )


@lru_cache(maxsize=1)
def get_analytics_config() -> AnalyticsConfig:
    path = Path(os.getenv("ANALYTICS_CONFIG_PATH", _DEFAULT_CONFIG))
    return build_config(_load_yaml(path))
