"""Mini README: Finance core for Budgetbook.

This package holds the append-only ledger store, the storage backends that
keep it durable, the exception hierarchy and the pure aggregation functions
that turn a ledger snapshot into balances and chart data.
"""

from .aggregator import (
    MonthTotals,
    balance,
    category_breakdown,
    category_chart_rows,
    format_amount,
    monthly_breakdown,
    monthly_chart_rows,
    recent_transactions,
    summarise,
)
from .errors import LedgerError, MalformedSnapshotError, PersistenceError, ValidationError
from .ledger import CATEGORIES, Category, LedgerStore, Transaction, TransactionKind
from .storage import InMemoryStorage, JsonFileStorage, LedgerStorage

__all__ = [
    "CATEGORIES",
    "Category",
    "InMemoryStorage",
    "JsonFileStorage",
    "LedgerError",
    "LedgerStorage",
    "LedgerStore",
    "MalformedSnapshotError",
    "MonthTotals",
    "PersistenceError",
    "Transaction",
    "TransactionKind",
    "ValidationError",
    "balance",
    "category_breakdown",
    "category_chart_rows",
    "format_amount",
    "monthly_breakdown",
    "monthly_chart_rows",
    "recent_transactions",
    "summarise",
]
