"""Auction lifecycle analytics aggregator."""

__version__ = "1.0.0"
