"""Mini README: Centralised configuration models and helpers for Budgetbook.

Structure:
    * BudgetbookSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to locate the ledger file, pick the service port
    and toggle month labelling. Values come from ``BUDGETBOOK_*`` environment
    variables or a local ``.env`` file. The configuration is cached so the
    cost of validation is incurred only once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class BudgetbookSettings(BaseSettings):
    """Runtime configuration for the Budgetbook ledger."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted ledger blob.",
    )
    storage_key: str = Field(
        "transactions",
        description="Fixed key naming the persisted ledger blob inside the data directory.",
        min_length=1,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the web service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level used by the CLI entry points.",
    )
    month_labels_include_year: bool = Field(
        False,
        description=(
            "Label monthly buckets as 'Jan 2024' instead of 'Jan'. Off by default,"
            " which merges the same month of different years into one bucket."
        ),
    )

    class Config:
        env_prefix = "BUDGETBOOK_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("storage_key")
    def _reject_path_separators(cls, value: str) -> str:
        """Keep the storage key a bare file stem inside the data directory."""

        if "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError("storage_key must not contain path separators")
        return value

    @property
    def ledger_path(self) -> Path:
        """Location of the JSON blob backing the ledger."""

        return self.data_directory / f"{self.storage_key}.json"


@lru_cache()
def get_settings() -> BudgetbookSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return BudgetbookSettings()
