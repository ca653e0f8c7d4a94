"""Pharmacy Locator — medicine inventory registry and nearby-match ranking."""

__version__ = "0.1.0"
