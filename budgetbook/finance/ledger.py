"""Mini README: Append-only finance ledger with a durable JSON round-trip.

Structure:
    * TransactionKind - enum representing income versus expense entries.
    * Category - fixed set of spending categories offered to users.
    * Transaction - immutable dataclass storing one recorded entry.
    * encode_transactions / decode_transactions - JSON blob codec.
    * LedgerStore - owns the ordered sequence, validates and persists appends.

The store is the only mutable piece of the application. It is loaded once
from its storage backend, grows exclusively through ``append`` and rewrites
the whole sequence after every append. A failed write leaves the in-memory
sequence untouched. Malformed stored data never crashes the process: the
store starts empty, records a warning and moves the bad blob aside.
"""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..logging_utils import get_logger
from .errors import LedgerError, MalformedSnapshotError, ValidationError
from .storage import JsonFileStorage, LedgerStorage

LOGGER = get_logger(__name__)

DEFAULT_STORAGE_KEY = "transactions"


class TransactionKind(str, Enum):
    """Enumerate the supported transaction kinds."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: Union[str, "TransactionKind"]) -> "TransactionKind":
        """Coerce arbitrary casing into a valid transaction kind."""

        if isinstance(value, cls):
            return value
        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValidationError(f"Unsupported transaction kind: {value}") from error


class Category(str, Enum):
    """Spending categories; stored for income entries too."""

    HOUSING = "Housing"
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    SHOPPING = "Shopping"
    OTHER = "Other"

    @classmethod
    def from_str(cls, value: Union[str, "Category"]) -> "Category":
        """Match a category label regardless of casing."""

        if isinstance(value, cls):
            return value
        try:
            normalised = value.strip().lower()
        except AttributeError as error:
            raise ValidationError(f"Unsupported category: {value}") from error
        for member in cls:
            if member.value.lower() == normalised:
                return member
        raise ValidationError(f"Unsupported category: {value}")


CATEGORIES: Tuple[str, ...] = tuple(member.value for member in Category)


@dataclass(frozen=True, slots=True)
class Transaction:
    """Represent one recorded income or expense entry."""

    id: str
    description: str
    amount: Decimal
    kind: TransactionKind
    category: Category
    occurred_at: datetime

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction using the persisted field names."""

        return {
            "id": self.id,
            "description": self.description,
            "amount": float(self.amount),
            "kind": self.kind.value,
            "category": self.category.value,
            "occurredAt": self.occurred_at.isoformat(),
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_description(value: object) -> str:
    """Return the stripped description, rejecting blank input."""

    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Description must not be empty")
    return value.strip()


def parse_amount(value: object) -> Decimal:
    """Parse user input into a positive, finite ``Decimal`` amount.

    Amounts are persisted as JSON numbers, so values whose float form would
    not read back identically (overflow, underflow or more than ~15
    significant digits) are rejected up front.
    """

    if isinstance(value, bool) or value is None:
        raise ValidationError("Amount must be a number")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError("Amount must not be empty")
        try:
            amount = Decimal(text)
        except InvalidOperation as error:
            raise ValidationError(f"Amount must be a number, got {value!r}") from error
    else:
        raise ValidationError(f"Amount must be a number, got {type(value).__name__}")

    if not amount.is_finite():
        raise ValidationError("Amount must be a finite number")
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    if Decimal(repr(float(amount))) != amount:
        raise ValidationError("Amount has too many digits to be stored exactly")
    return amount


def as_utc(moment: datetime) -> datetime:
    """Convert to UTC, treating naive values as already being UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _parse_timestamp(value: object) -> datetime:
    """Parse ISO-8601 strings into UTC, accepting a trailing ``Z``."""

    if not isinstance(value, str):
        raise ValueError("Timestamps must be ISO-8601 strings")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def encode_transactions(transactions: Iterable[Transaction]) -> str:
    """Serialise the full sequence into the persisted JSON blob."""

    return json.dumps([transaction.as_dict() for transaction in transactions], indent=2)


def _decode_record(index: int, record: Any) -> Transaction:
    if not isinstance(record, dict):
        raise MalformedSnapshotError(f"Record {index} is not an object")
    # "type" and "date" are the field names written by the first release.
    kind_value = record.get("kind", record.get("type"))
    timestamp_value = record.get("occurredAt", record.get("date"))
    amount = record.get("amount")
    try:
        if not isinstance(amount, Decimal):
            raise ValueError("amount must be numeric")
        identifier = record["id"]
        if not isinstance(identifier, str) or not identifier:
            raise ValueError("id must be a non-empty string")
        return Transaction(
            id=identifier,
            description=validate_description(record.get("description")),
            amount=parse_amount(amount),
            kind=TransactionKind.from_str(kind_value),
            category=Category.from_str(record.get("category")),
            occurred_at=_parse_timestamp(timestamp_value),
        )
    except (KeyError, ValueError) as error:
        raise MalformedSnapshotError(f"Record {index} is invalid: {error}") from error


def decode_transactions(payload: str) -> Tuple[Transaction, ...]:
    """Parse a persisted blob, raising ``MalformedSnapshotError`` on bad data."""

    try:
        records = json.loads(payload, parse_float=Decimal, parse_int=Decimal)
    except ValueError as error:
        raise MalformedSnapshotError(f"Ledger payload is not valid JSON: {error}") from error
    if not isinstance(records, list):
        raise MalformedSnapshotError("Ledger payload must be a JSON list")

    transactions: List[Transaction] = []
    seen_ids = set()
    for index, record in enumerate(records):
        transaction = _decode_record(index, record)
        if transaction.id in seen_ids:
            raise MalformedSnapshotError(f"Duplicate transaction id {transaction.id}")
        seen_ids.add(transaction.id)
        transactions.append(transaction)
    return tuple(transactions)


class LedgerStore:
    """Own the ordered transaction sequence and its durable copy."""

    def __init__(
        self,
        storage: LedgerStorage,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._storage = storage
        self.storage_key = storage_key
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _new_id
        self._transactions: Tuple[Transaction, ...] = ()
        self._ids: set[str] = set()
        self._lock = threading.Lock()
        self.load_warning: Optional[str] = None
        LOGGER.debug(
            "Ledger store initialised with %s storage under key '%s'",
            storage.backend_name,
            storage_key,
        )

    @classmethod
    def open(cls, storage: LedgerStorage, **kwargs: Any) -> "LedgerStore":
        """Create a store and load its persisted snapshot."""

        store = cls(storage, **kwargs)
        store.load()
        return store

    @classmethod
    def from_settings(cls, settings: Any = None) -> "LedgerStore":
        """Open the file-backed store described by the application settings."""

        if settings is None:
            from ..configuration import get_settings

            settings = get_settings()
        storage = JsonFileStorage(settings.data_directory)
        return cls.open(storage, storage_key=settings.storage_key)

    def load(self) -> Tuple[Transaction, ...]:
        """Replace the in-memory sequence with the persisted snapshot."""

        payload = self._storage.read(self.storage_key)
        warning: Optional[str] = None
        if payload is None:
            transactions: Tuple[Transaction, ...] = ()
        else:
            try:
                transactions = decode_transactions(payload)
            except MalformedSnapshotError as error:
                location = self._storage.quarantine(self.storage_key)
                warning = f"Stored ledger was unreadable and has been set aside ({error})."
                if location:
                    warning += f" Original data kept at {location}."
                LOGGER.warning("Starting with an empty ledger: %s", warning)
                transactions = ()

        with self._lock:
            self._transactions = transactions
            self._ids = {transaction.id for transaction in transactions}
            self.load_warning = warning
        LOGGER.debug("Loaded %s transactions from '%s'", len(transactions), self.storage_key)
        return transactions

    def append(
        self,
        description: object,
        amount: object,
        kind: Union[str, TransactionKind] = TransactionKind.EXPENSE,
        category: Union[str, Category] = Category.OTHER,
    ) -> Transaction:
        """Validate, append and persist a new transaction.

        Raises ``ValidationError`` for rejected input and ``PersistenceError``
        when the write fails; in both cases the ledger is left unchanged.
        """

        clean_description = validate_description(description)
        clean_amount = parse_amount(amount)
        clean_kind = TransactionKind.from_str(kind)
        clean_category = Category.from_str(category)

        with self._lock:
            transaction_id = self._id_factory()
            if transaction_id in self._ids:
                raise LedgerError(f"Generated transaction id {transaction_id} is already in use")
            transaction = Transaction(
                id=transaction_id,
                description=clean_description,
                amount=clean_amount,
                kind=clean_kind,
                category=clean_category,
                occurred_at=as_utc(self._clock()),
            )
            updated = self._transactions + (transaction,)
            try:
                self._storage.write(self.storage_key, encode_transactions(updated))
            except LedgerError:
                LOGGER.exception("Failed to persist transaction %s; ledger unchanged", transaction_id)
                raise
            self._transactions = updated
            self._ids.add(transaction_id)

        LOGGER.info(
            "Recorded %s of %s in %s (%s)",
            clean_kind.value,
            clean_amount,
            clean_category.value,
            transaction_id,
        )
        return transaction

    def snapshot(self) -> Tuple[Transaction, ...]:
        """Return the current sequence in insertion order."""

        return self._transactions

    def __len__(self) -> int:
        return len(self._transactions)
