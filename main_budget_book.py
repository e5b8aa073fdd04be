"""Mini README: Entry point CLI for Budgetbook.

This script exposes a Typer CLI that starts the FastAPI ledger service,
records a transaction from the terminal and prints the derived summaries.
Every command reads its defaults from ``BUDGETBOOK_*`` environment variables
and configures logging before touching the ledger.
"""

from __future__ import annotations

import typer
import uvicorn

from budgetbook.configuration import get_settings
from budgetbook.finance import (
    LedgerError,
    LedgerStore,
    balance,
    category_breakdown,
    format_amount,
    monthly_breakdown,
)
from budgetbook.logging_utils import configure_root_logger

cli = typer.Typer(help="Record transactions and review balances in Budgetbook.")


def _open_store() -> LedgerStore:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        store = LedgerStore.from_settings(settings)
    except LedgerError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error
    if store.load_warning:
        typer.echo(f"Warning: {store.load_warning}", err=True)
    return store


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 / :: wildcard addresses directly.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Budgetbook on {effective_host}:{effective_port}.\n"
        f"API available at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "budgetbook.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def add(
    description: str = typer.Argument(..., help="What the money was for."),
    amount: str = typer.Argument(..., help="Positive amount, e.g. 42.50."),
    kind: str = typer.Option("expense", help="Either 'income' or 'expense'."),
    category: str = typer.Option("Other", help="Spending category."),
) -> None:
    """Record a new transaction."""

    store = _open_store()
    try:
        transaction = store.append(description, amount, kind, category)
    except LedgerError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1) from error
    sign = "+" if transaction.is_income else "-"
    typer.echo(
        f"Transaction added successfully: {transaction.description} "
        f"{sign}{format_amount(transaction.amount)} ({transaction.category.value})"
    )


@cli.command()
def summary() -> None:
    """Print the balance, expense categories and monthly totals."""

    settings = get_settings()
    store = _open_store()
    snapshot = store.snapshot()

    typer.echo(f"Transactions: {len(snapshot)}")
    typer.echo(f"Balance: {format_amount(balance(snapshot))}")
    categories = category_breakdown(snapshot)
    if categories:
        typer.echo("Expenses by category:")
        for name, total in categories.items():
            typer.echo(f"  {name}: {format_amount(total)}")
    months = monthly_breakdown(snapshot, include_year=settings.month_labels_include_year)
    if months:
        typer.echo("Monthly totals:")
        for label, totals in months.items():
            typer.echo(
                f"  {label}: income {format_amount(totals.income_total)}"
                f" / expense {format_amount(totals.expense_total)}"
            )


if __name__ == "__main__":
    cli()
