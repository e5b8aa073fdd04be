"""Mini README: Durable blob storage backing the finance ledger.

Structure:
    * LedgerStorage - abstract key/blob interface used by ``LedgerStore``.
    * JsonFileStorage - one ``<key>.json`` file per key inside a directory.
    * InMemoryStorage - dictionary-backed storage for tests and demos.

The ledger serialises its whole transaction sequence into a single text blob
on every append, so storages only need whole-blob reads and writes. File
writes go through a temporary sibling and ``os.replace`` so a crash never
leaves a half-written ledger behind. ``quarantine`` moves an unreadable blob
aside instead of letting the next write overwrite it.
"""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from ..logging_utils import get_logger
from .errors import PersistenceError

LOGGER = get_logger(__name__)


class LedgerStorage(ABC):
    """Base interface for storing the serialised ledger blob."""

    backend_name: str = "generic"

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the blob stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """Durably replace the blob stored under ``key``."""

    @abstractmethod
    def quarantine(self, key: str) -> Optional[str]:
        """Move the blob under ``key`` aside and return where it went."""


def _quarantine_suffix() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")


class JsonFileStorage(LedgerStorage):
    """Store each key as ``<directory>/<key>.json`` on the local disk."""

    backend_name = "json-file"

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        LOGGER.debug("Initialising JSON file storage in %s", self.directory)

    def path_for(self, key: str) -> Path:
        """Return the file path used for ``key``."""

        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            LOGGER.debug("No persisted blob found at %s", path)
            return None
        except (OSError, UnicodeDecodeError) as error:
            raise PersistenceError(f"Unable to read ledger from {path}: {error}") from error

    def write(self, key: str, payload: str) -> None:
        path = self.path_for(key)
        temp_name: Optional[str] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            descriptor, temp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=str(path.parent)
            )
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, path)
            temp_name = None
        except OSError as error:
            raise PersistenceError(f"Unable to write ledger to {path}: {error}") from error
        finally:
            if temp_name is not None:
                Path(temp_name).unlink(missing_ok=True)
        LOGGER.debug("Persisted %s characters to %s", len(payload), path)

    def quarantine(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        target = path.with_name(f"{key}.corrupt-{_quarantine_suffix()}.json")
        try:
            os.replace(path, target)
        except OSError as error:
            raise PersistenceError(f"Unable to move malformed ledger {path}: {error}") from error
        LOGGER.warning("Moved malformed ledger %s to %s", path, target)
        return str(target)


class InMemoryStorage(LedgerStorage):
    """Keep blobs in a dictionary; nothing survives the process."""

    backend_name = "memory"

    def __init__(self, blobs: Optional[Dict[str, str]] = None) -> None:
        self.blobs: Dict[str, str] = dict(blobs or {})
        self.quarantined: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def write(self, key: str, payload: str) -> None:
        self.blobs[key] = payload

    def quarantine(self, key: str) -> Optional[str]:
        if key not in self.blobs:
            return None
        target = f"{key}.corrupt-{_quarantine_suffix()}"
        self.quarantined[target] = self.blobs.pop(key)
        return target
