"""Mini README: Pure derivations over a ledger snapshot.

Structure:
    * balance - income total minus expense total.
    * category_breakdown - expense totals per category.
    * monthly_breakdown - income and expense totals per month label.
    * category_chart_rows / monthly_chart_rows - chart-ready row lists.
    * recent_transactions - newest-first rows for the transaction list.
    * summarise - dashboard bundle of all of the above.

Every function takes a snapshot (any iterable of ``Transaction``) and never
mutates it or performs I/O. Totals are ``Decimal`` so sums stay exact; only
the display helpers round, to two places. Month labels use a fixed English
abbreviation table so results do not depend on the process locale.

Known limitation: without ``include_year`` the monthly buckets are keyed by
month name alone, so January 2024 and January 2025 share the "Jan" bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from .ledger import Transaction, TransactionKind, as_utc

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

_ZERO = Decimal("0")
_CENTS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class MonthTotals:
    """Income and expense totals for one month bucket."""

    income_total: Decimal = _ZERO
    expense_total: Decimal = _ZERO

    def add(self, transaction: Transaction) -> "MonthTotals":
        if transaction.kind is TransactionKind.INCOME:
            return MonthTotals(self.income_total + transaction.amount, self.expense_total)
        return MonthTotals(self.income_total, self.expense_total + transaction.amount)


def month_label(moment: datetime, *, include_year: bool = False) -> str:
    """Return UTC ``"Jan"`` style labels, optionally suffixed with the year."""

    moment = as_utc(moment)
    label = MONTH_ABBREVIATIONS[moment.month - 1]
    return f"{label} {moment.year}" if include_year else label


def format_amount(value: Decimal) -> str:
    """Round to cents for display."""

    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def balance(snapshot: Iterable[Transaction]) -> Decimal:
    """Income minus expenses; an empty ledger balances to zero."""

    total = _ZERO
    for transaction in snapshot:
        if transaction.kind is TransactionKind.INCOME:
            total += transaction.amount
        else:
            total -= transaction.amount
    return total


def category_breakdown(snapshot: Iterable[Transaction]) -> Dict[str, Decimal]:
    """Sum expenses per category in order of first appearance."""

    totals: Dict[str, Decimal] = {}
    for transaction in snapshot:
        if transaction.kind is not TransactionKind.EXPENSE:
            continue
        label = transaction.category.value
        totals[label] = totals.get(label, _ZERO) + transaction.amount
    return totals


def monthly_breakdown(
    snapshot: Iterable[Transaction], *, include_year: bool = False
) -> Dict[str, MonthTotals]:
    """Bucket income and expense totals by the month of ``occurred_at``."""

    buckets: Dict[str, MonthTotals] = {}
    for transaction in snapshot:
        label = month_label(transaction.occurred_at, include_year=include_year)
        buckets[label] = buckets.get(label, MonthTotals()).add(transaction)
    return buckets


def category_chart_rows(snapshot: Iterable[Transaction]) -> List[Dict[str, Any]]:
    """Rows of ``{"name", "value"}`` for the category pie chart."""

    return [
        {"name": name, "value": float(total)}
        for name, total in category_breakdown(snapshot).items()
    ]


def monthly_chart_rows(
    snapshot: Iterable[Transaction], *, include_year: bool = False
) -> List[Dict[str, Any]]:
    """Rows of ``{"month", "income", "expense"}`` for the monthly bar chart."""

    return [
        {
            "month": label,
            "income": float(totals.income_total),
            "expense": float(totals.expense_total),
        }
        for label, totals in monthly_breakdown(snapshot, include_year=include_year).items()
    ]


def recent_transactions(
    snapshot: Iterable[Transaction], *, limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """Newest-first display rows with signed two-decimal amounts."""

    ordered = list(snapshot)[::-1]
    if limit is not None:
        ordered = ordered[: max(limit, 0)]
    rows: List[Dict[str, Any]] = []
    for transaction in ordered:
        sign = "+" if transaction.kind is TransactionKind.INCOME else "-"
        row = transaction.as_dict()
        row["display_amount"] = f"{sign}{format_amount(transaction.amount)}"
        row["date_label"] = as_utc(transaction.occurred_at).date().isoformat()
        rows.append(row)
    return rows


def summarise(snapshot: Iterable[Transaction], *, include_year: bool = False) -> Dict[str, Any]:
    """Bundle every derived view for dashboard rendering."""

    transactions = tuple(snapshot)
    current_balance = balance(transactions)
    return {
        "transaction_count": len(transactions),
        "balance": float(current_balance),
        "balance_display": format_amount(current_balance),
        "categories": category_chart_rows(transactions),
        "monthly": monthly_chart_rows(transactions, include_year=include_year),
    }
