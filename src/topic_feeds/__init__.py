"""Periodic topic feed aggregation into a JSON snapshot."""

__version__ = "0.1.0"
