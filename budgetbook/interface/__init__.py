"""Mini README: Interactive interfaces for Budgetbook.

Exports the FastAPI application factory serving the ledger over HTTP. The
command line launcher lives in ``main_budget_book.py`` at the repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
