"""Quantitative risk-management and position-sizing core."""

__version__ = "0.1.0"
