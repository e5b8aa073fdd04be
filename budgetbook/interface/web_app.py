"""Mini README: FastAPI-powered ledger service for Budgetbook.

Structure:
    * create_application - application factory wiring the ledger store and
      aggregation routes.

The service replaces the original single-page app's state handling: forms
post new transactions, and the dashboard pulls the balance, category chart
rows and monthly chart rows from ``/summary``. Rendering is left to the
client; every route returns JSON.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Query
from fastapi.responses import JSONResponse

from .. import __version__
from ..configuration import BudgetbookSettings, get_settings
from ..finance import (
    CATEGORIES,
    LedgerError,
    LedgerStore,
    PersistenceError,
    TransactionKind,
    ValidationError,
    recent_transactions,
    summarise,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def create_application(
    store: Optional[LedgerStore] = None,
    settings: Optional[BudgetbookSettings] = None,
) -> FastAPI:
    """Create the FastAPI application around an explicitly owned ledger store.

    Settings are only loaded from the environment when no store is injected;
    an injected store without settings uses month-only labels.
    """

    if store is None:
        settings = settings or get_settings()
        try:
            store = LedgerStore.from_settings(settings)
        except PersistenceError as error:
            LOGGER.error("Unable to load ledger, refusing to start: %s", error)
            raise
    ledger = store
    include_year = settings.month_labels_include_year if settings else False

    app = FastAPI(title="Budgetbook", version=__version__)
    app.state.ledger = ledger

    @app.get("/categories")
    async def categories() -> JSONResponse:
        """Return the selectable categories and transaction kinds."""

        return JSONResponse(
            {
                "categories": list(CATEGORIES),
                "kinds": [kind.value for kind in TransactionKind],
            }
        )

    @app.get("/transactions")
    async def list_transactions(limit: Optional[int] = Query(None, ge=0)) -> JSONResponse:
        """Return transactions newest first."""

        rows = recent_transactions(ledger.snapshot(), limit=limit)
        LOGGER.debug("Returning %s transactions", len(rows))
        return JSONResponse({"transactions": rows})

    # Plain def: append blocks on the lock and fsync, so it runs in the threadpool.
    @app.post("/transactions")
    def add_transaction(
        description: str = Form(""),
        amount: str = Form(""),
        kind: str = Form(TransactionKind.EXPENSE.value),
        category: str = Form("Other"),
    ) -> JSONResponse:
        """Validate and record a new transaction."""

        try:
            transaction = ledger.append(description, amount, kind, category)
        except ValidationError as error:
            LOGGER.info("Rejected transaction: %s", error)
            raise HTTPException(status_code=400, detail=str(error)) from error
        except PersistenceError as error:
            raise HTTPException(
                status_code=503, detail=f"Transaction was not saved: {error}"
            ) from error
        except LedgerError as error:
            LOGGER.error("Transaction rejected by the ledger: %s", error)
            raise HTTPException(
                status_code=500, detail=f"Transaction was not recorded: {error}"
            ) from error
        return JSONResponse(
            {
                "message": "Transaction added successfully",
                "transaction": transaction.as_dict(),
            },
            status_code=201,
        )

    @app.get("/summary")
    async def summary() -> JSONResponse:
        """Return balance and chart data derived from the current snapshot."""

        payload = summarise(ledger.snapshot(), include_year=include_year)
        payload["load_warning"] = ledger.load_warning
        LOGGER.debug(
            "Summary -> transactions: %s balance: %s",
            payload["transaction_count"],
            payload["balance_display"],
        )
        return JSONResponse(payload)

    return app
