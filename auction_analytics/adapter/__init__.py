from __future__ import annotations

from .service import DEFAULT_SAMPLE_RATE, AnalyticsAdapter, resolve_sample_rate

__all__ = ["DEFAULT_SAMPLE_RATE", "AnalyticsAdapter", "resolve_sample_rate"]
