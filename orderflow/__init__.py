"""Wholesale order lifecycle and commercial computation engine."""

__version__ = "1.0.0"
