"""Collector transport and dispatch."""

from __future__ import annotations

from .client import HttpTransport, LocalTransport, Transport, build_transport
from .dispatch import Dispatcher

__all__ = ["Dispatcher", "HttpTransport", "LocalTransport", "Transport", "build_transport"]
