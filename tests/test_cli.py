"""Mini README: Tests for the Typer command line entry point.

The commands run against a temporary data directory so the recorded
transactions persist between invocations exactly as they would on disk.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from typer.testing import CliRunner

from budgetbook.configuration import get_settings
from main_budget_book import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> Iterator[None]:
    monkeypatch.setenv("BUDGETBOOK_DATA_DIRECTORY", str(tmp_path))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_add_then_summary_prints_totals() -> None:
    added = runner.invoke(cli, ["add", "Rent", "1000", "--category", "Housing"])
    runner.invoke(cli, ["add", "Salary", "3000", "--kind", "income"])

    result = runner.invoke(cli, ["summary"])

    assert added.exit_code == 0
    assert "Transaction added successfully" in added.output
    assert "-1000.00" in added.output
    assert result.exit_code == 0
    assert "Transactions: 2" in result.output
    assert "Balance: 2000.00" in result.output
    assert "Housing: 1000.00" in result.output


def test_add_rejects_bad_amount() -> None:
    result = runner.invoke(cli, ["add", "Snacks", "abc"])

    assert result.exit_code == 1
    assert "Amount must be a number" in result.output


def test_summary_warns_about_malformed_ledger(tmp_path) -> None:
    (tmp_path / "transactions.json").write_text("oops", encoding="utf-8")

    result = runner.invoke(cli, ["summary"])

    assert result.exit_code == 0
    assert "Warning:" in result.output
    assert "Balance: 0.00" in result.output
