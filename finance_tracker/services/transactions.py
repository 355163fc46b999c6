"""Transaction service: validates and normalizes requests, then delegates to the store.

This is the stateless request handler behind ``/api/transactions``. Each operation is a
single store call; store failures are logged and re-raised as ``StoreError`` with an
operation-specific message so raw driver errors never reach the client.
"""

import datetime as dt
import math
from typing import Any

from finance_tracker.core.errors import NotFoundError, StoreError, ValidationError
from finance_tracker.core.models import (
    DeleteConfirmation,
    Transaction,
    TransactionDeleteIn,
    TransactionDraft,
    TransactionIn,
    TransactionType,
    TransactionUpdateIn,
)
from finance_tracker.core.utils import get_logger
from finance_tracker.services.store import TransactionStore

logger = get_logger("finance-tracker.transactions")

DEFAULT_CATEGORY = "General"
MAX_TRANSACTION_ID = 2**63 - 1

MSG_MISSING_FIELDS = "Missing required fields: description, amount, date"
MSG_INVALID_AMOUNT = "Amount must be a valid number"
MSG_INVALID_DATE = "Date must be a valid date"
MSG_INVALID_TYPE = "Type must be either 'income' or 'expense'"
MSG_ID_REQUIRED = "Transaction ID is required"
MSG_INVALID_ID = "Invalid transaction ID"
MSG_NOT_FOUND = "Transaction not found"
MSG_DELETED = "Transaction deleted successfully"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_transaction_id(value: Any) -> int:
    """Parse a wire id (decimal string or int) into the store's integer id."""
    if _is_blank(value):
        raise ValidationError(MSG_ID_REQUIRED)
    if isinstance(value, bool):
        raise ValidationError(MSG_INVALID_ID)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValidationError(MSG_INVALID_ID)
    if not 0 < parsed <= MAX_TRANSACTION_ID:
        raise ValidationError(MSG_INVALID_ID)
    return parsed


def parse_amount(value: Any) -> float:
    """Parse a signed amount from a number or a numeric string."""
    if isinstance(value, bool):
        raise ValidationError(MSG_INVALID_AMOUNT)
    if isinstance(value, int | float):
        try:
            amount = float(value)
        except OverflowError as exc:
            raise ValidationError(MSG_INVALID_AMOUNT) from exc
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError as exc:
            raise ValidationError(MSG_INVALID_AMOUNT) from exc
    else:
        raise ValidationError(MSG_INVALID_AMOUNT)
    if not math.isfinite(amount):
        raise ValidationError(MSG_INVALID_AMOUNT)
    return amount


def parse_date(value: Any) -> dt.date:
    """Parse a calendar date from ``YYYY-MM-DD`` or an ISO datetime; time of day is dropped."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise ValidationError(MSG_INVALID_DATE)
    try:
        return dt.datetime.fromisoformat(value.strip()).date()
    except ValueError as exc:
        raise ValidationError(MSG_INVALID_DATE) from exc


def derive_type(amount: float, explicit: str | None = None) -> TransactionType:
    """Return the explicit type when given, otherwise derive it from the amount sign.

    An explicit type is kept even when it disagrees with the sign.
    """
    if _is_blank(explicit):
        return TransactionType.INCOME if amount >= 0 else TransactionType.EXPENSE
    try:
        return TransactionType(explicit.strip().lower())
    except ValueError as exc:
        raise ValidationError(MSG_INVALID_TYPE) from exc


def normalize_transaction(payload: TransactionIn) -> TransactionDraft:
    """Validate a create/update body and return the fields to store."""
    if _is_blank(payload.description) or payload.amount is None or _is_blank(payload.date):
        raise ValidationError(MSG_MISSING_FIELDS)
    amount = parse_amount(payload.amount)
    return TransactionDraft(
        description=payload.description.strip(),
        amount=amount,
        category=(payload.category or "").strip() or DEFAULT_CATEGORY,
        date=parse_date(payload.date),
        type=derive_type(amount, payload.type),
    )


class TransactionService:
    """CRUD operations over a TransactionStore."""

    def __init__(self, store: TransactionStore) -> None:
        """Initialize the service with the store it delegates to."""
        self.store = store

    def list_transactions(self) -> list[Transaction]:
        """Return all transactions, most recent first."""
        try:
            transactions = self.store.list_all()
        except StoreError as exc:
            logger.exception("Error fetching transactions")
            raise StoreError("Failed to fetch transactions") from exc
        logger.info(f"Listed {len(transactions)} transactions")
        return transactions

    def create_transaction(self, payload: TransactionIn) -> Transaction:
        """Validate, normalize and insert a new transaction."""
        draft = normalize_transaction(payload)
        try:
            created = self.store.insert(draft)
        except StoreError as exc:
            logger.exception("Error adding transaction")
            raise StoreError("Failed to add transaction") from exc
        logger.info(f"Created transaction id={created.id} amount={created.amount} type={created.type}")
        return created

    def update_transaction(self, payload: TransactionUpdateIn) -> Transaction:
        """Fully replace an existing transaction."""
        transaction_id = parse_transaction_id(payload.id)
        draft = normalize_transaction(payload)
        try:
            updated = self.store.replace(transaction_id, draft)
        except StoreError as exc:
            logger.exception(f"Error updating transaction id={transaction_id}")
            raise StoreError("Failed to update transaction") from exc
        if updated is None:
            logger.warning(f"Update target not found: id={transaction_id}")
            raise NotFoundError(MSG_NOT_FOUND)
        logger.info(f"Updated transaction id={updated.id}")
        return updated

    def delete_transaction(self, payload: TransactionDeleteIn) -> DeleteConfirmation:
        """Hard-delete a transaction."""
        transaction_id = parse_transaction_id(payload.id)
        try:
            deleted = self.store.delete(transaction_id)
        except StoreError as exc:
            logger.exception(f"Error deleting transaction id={transaction_id}")
            raise StoreError("Failed to delete transaction") from exc
        if not deleted:
            logger.warning(f"Delete target not found: id={transaction_id}")
            raise NotFoundError(MSG_NOT_FOUND)
        logger.info(f"Deleted transaction id={transaction_id}")
        return DeleteConfirmation(message=MSG_DELETED)
