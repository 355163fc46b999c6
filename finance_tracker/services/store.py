"""Transaction store: the data-access interface and its SQLAlchemy implementation.

The store owns persisted transactions. It knows nothing about request validation:
callers hand it already-normalized ``TransactionDraft`` values and integer ids.
Driver and connectivity failures surface as ``StoreError``.
"""

import datetime as dt
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.core.db import Database, TransactionRecord
from finance_tracker.core.errors import StoreError
from finance_tracker.core.models import Transaction, TransactionDraft
from finance_tracker.core.utils import get_logger, utcnow

logger = get_logger("finance-tracker.store")


class TransactionStore(ABC):
    """Abstract interface for transaction persistence."""

    @abstractmethod
    def list_all(self) -> list[Transaction]:
        """Return every transaction, newest date first, ties broken by id descending."""

    @abstractmethod
    def get(self, transaction_id: int) -> Transaction | None:
        """Return one transaction, or None when it does not exist."""

    @abstractmethod
    def insert(self, draft: TransactionDraft) -> Transaction:
        """Persist a new transaction, assigning its id and creation time."""

    @abstractmethod
    def replace(self, transaction_id: int, draft: TransactionDraft) -> Transaction | None:
        """Replace every editable field of a transaction and stamp its update time.

        Returns None when no transaction has that id.
        """

    @abstractmethod
    def delete(self, transaction_id: int) -> bool:
        """Hard-delete a transaction. Returns False when no transaction has that id."""


def _as_utc(value: dt.datetime | None) -> dt.datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value


def record_to_model(record: TransactionRecord) -> Transaction:
    """Convert a database row into the wire model."""
    return Transaction(
        id=str(record.id),
        description=record.description,
        amount=record.amount,
        category=record.category,
        date=record.date,
        type=record.type,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


class SqlTransactionStore(TransactionStore):
    """TransactionStore backed by a SQLAlchemy database."""

    def __init__(self, database: Database) -> None:
        """Initialize the store with the application's database handle."""
        self.database = database

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.database.session_scope() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.warning(f"Store operation failed: {exc!r}")
            raise StoreError(f"Transaction store unavailable: {exc.__class__.__name__}") from exc

    def list_all(self) -> list[Transaction]:
        """Return every transaction, newest date first, ties broken by id descending."""
        stmt = select(TransactionRecord).order_by(TransactionRecord.date.desc(), TransactionRecord.id.desc())
        with self._session() as session:
            return [record_to_model(record) for record in session.scalars(stmt)]

    def get(self, transaction_id: int) -> Transaction | None:
        """Return one transaction, or None when it does not exist."""
        with self._session() as session:
            record = session.get(TransactionRecord, transaction_id)
            return record_to_model(record) if record else None

    def insert(self, draft: TransactionDraft) -> Transaction:
        """Persist a new transaction, assigning its id and creation time."""
        record = TransactionRecord(
            description=draft.description,
            amount=draft.amount,
            category=draft.category,
            date=draft.date,
            type=draft.type.value,
            created_at=utcnow(),
        )
        with self._session() as session:
            session.add(record)
            session.flush()
            return record_to_model(record)

    def replace(self, transaction_id: int, draft: TransactionDraft) -> Transaction | None:
        """Replace every editable field of a transaction and stamp its update time."""
        with self._session() as session:
            record = session.get(TransactionRecord, transaction_id, with_for_update=True)
            if record is None:
                return None
            record.description = draft.description
            record.amount = draft.amount
            record.category = draft.category
            record.date = draft.date
            record.type = draft.type.value
            record.updated_at = utcnow()
            session.flush()
            return record_to_model(record)

    def delete(self, transaction_id: int) -> bool:
        """Hard-delete a transaction. Returns False when no transaction has that id."""
        stmt = delete(TransactionRecord).where(TransactionRecord.id == transaction_id)
        with self._session() as session:
            result = session.execute(stmt)
            return result.rowcount > 0
