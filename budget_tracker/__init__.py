"""Household spend tracker with billing-period budget alerts."""

__version__ = "0.1.0"
