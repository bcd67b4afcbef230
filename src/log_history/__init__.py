"""Aggregated change-log viewer for products, suppliers and repair jobs."""

__version__ = "0.1.0"
