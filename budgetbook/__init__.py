"""Mini README: Core package initializer for Budgetbook.

Budgetbook is a personal finance ledger: it records income and expense
entries in an append-only store and derives balances, category totals and
monthly totals for display. The ``finance`` package holds the ledger and
its aggregations; ``interface`` exposes them over HTTP.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]

__version__ = "0.1.0"
