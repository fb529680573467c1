"""Millbook: production and inventory ledger for an oilseed crushing mill."""

__version__ = "1.0.0"
