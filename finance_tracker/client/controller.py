"""Application state controller for the transaction UI.

Holds the session's cached transaction list plus transient UI state (loading flag, error
and success messages, the transaction being edited, per-record deleting flags) and keeps
the list consistent with the server by applying each API response to it. The server stays
authoritative: the controller never invents records, it only splices in what came back.
"""

import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from finance_tracker.client.api_client import TransactionsApiClient
from finance_tracker.client.presentation import TransactionForm, form_to_payload, validate_form
from finance_tracker.core.errors import FinanceTrackerError
from finance_tracker.core.models import MonthlySummary, Transaction
from finance_tracker.core.settings import Settings
from finance_tracker.core.utils import get_logger
from finance_tracker.services.aggregation import current_balance, monthly_summary

logger = get_logger("finance-tracker.client")

CONFIRM_DELETE_PROMPT = "Are you sure you want to delete this transaction?"
LOAD_ERROR_MESSAGE = "Failed to load transactions. Please try again."
SUCCESS_TTL_SECONDS = 3.0


class EditMode(StrEnum):
    """Whether the form is creating a new transaction or editing an existing one."""

    IDLE = "idle"
    EDITING = "editing"


def _sort_key(transaction: Transaction) -> tuple:
    return (transaction.date, int(transaction.id) if transaction.id.isdigit() else 0)


class TransactionController:
    """Client-side controller behind the form, list and chart components."""

    def __init__(
        self,
        api: TransactionsApiClient,
        confirm: Callable[[str], bool],
        *,
        success_ttl: float = SUCCESS_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize with an API client and a blocking yes/no confirmation callback."""
        self.api = api
        self.confirm = confirm
        self.success_ttl = success_ttl
        self.clock = clock
        self.transactions: list[Transaction] = []
        # Stays True until the first load settles.
        self.loading = True
        self.submitting = False
        self.error: str | None = None
        self.editing: Transaction | None = None
        self.deleting: set[str] = set()
        self._success: tuple[str, float] | None = None

    @classmethod
    def from_settings(cls, settings: Settings, confirm: Callable[[str], bool]) -> "TransactionController":
        """Build a controller talking to ``settings.api_base_url``."""
        return cls(TransactionsApiClient.from_settings(settings), confirm, success_ttl=settings.success_message_ttl)

    @property
    def edit_mode(self) -> EditMode:
        """Current state of the edit-mode state machine."""
        return EditMode.EDITING if self.editing is not None else EditMode.IDLE

    @property
    def success_message(self) -> str | None:
        """The last success message, until ``success_ttl`` seconds have passed."""
        if self._success is None:
            return None
        message, expires_at = self._success
        if self.clock() >= expires_at:
            self._success = None
            return None
        return message

    @property
    def balance(self) -> float:
        """Sum of all signed amounts in the cached list."""
        return current_balance(self.transactions)

    @property
    def monthly_summary(self) -> list[MonthlySummary]:
        """Monthly buckets for the chart, oldest first."""
        return monthly_summary(self.transactions)

    def is_deleting(self, transaction_id: str) -> bool:
        """Whether a delete for this transaction is in flight."""
        return transaction_id in self.deleting

    def dismiss_error(self) -> None:
        """Clear the error message."""
        self.error = None

    def _flash(self, message: str) -> None:
        self._success = (message, self.clock() + self.success_ttl)

    def _resort(self) -> None:
        self.transactions.sort(key=_sort_key, reverse=True)

    def load(self) -> bool:
        """Replace the cached list with the server's. On failure the list is left as it was."""
        self.loading = True
        try:
            self.transactions = self.api.fetch_all()
            self.error = None
            return True
        except FinanceTrackerError as exc:
            logger.warning(f"Error fetching transactions: {exc.message}")
            self.error = LOAD_ERROR_MESSAGE
            return False
        finally:
            self.loading = False

    def add(self, payload: dict[str, Any]) -> Transaction | None:
        """Create a transaction and splice the stored record into the list."""
        if self.submitting:
            return None
        self.submitting = True
        try:
            created = self.api.create(payload)
        except FinanceTrackerError as exc:
            logger.warning(f"Error adding transaction: {exc.message}")
            self.error = exc.message
            return None
        finally:
            self.submitting = False
        self.transactions.insert(0, created)
        self._resort()
        self._flash("Transaction added successfully!")
        return created

    def start_edit(self, transaction: Transaction) -> None:
        """Enter edit mode for a transaction."""
        self.editing = transaction

    def cancel_edit(self) -> None:
        """Leave edit mode without saving."""
        self.editing = None

    def edit(self, payload: dict[str, Any]) -> Transaction | None:
        """Replace the transaction being edited. Edit mode stays active on failure."""
        if self.editing is None:
            msg = "edit() called while no transaction is being edited"
            raise RuntimeError(msg)
        if self.submitting:
            return None
        self.submitting = True
        try:
            updated = self.api.update(self.editing.id, payload)
        except FinanceTrackerError as exc:
            logger.warning(f"Error updating transaction {self.editing.id}: {exc.message}")
            self.error = exc.message
            return None
        finally:
            self.submitting = False
        self.transactions = [updated if t.id == updated.id else t for t in self.transactions]
        self._resort()
        self.editing = None
        self._flash("Transaction updated successfully!")
        return updated

    def submit(self, form: TransactionForm) -> dict[str, str]:
        """Validate the form and create or update depending on edit mode.

        Returns the field errors; the request is only sent when there are none.
        """
        errors = validate_form(form)
        if errors:
            return errors
        payload = form_to_payload(form)
        if self.edit_mode is EditMode.EDITING:
            self.edit(payload)
        else:
            self.add(payload)
        return errors

    def remove(self, transaction_id: str) -> bool:
        """Delete a transaction after the user confirms. Returns True when it was deleted."""
        if transaction_id in self.deleting:
            return False
        if not self.confirm(CONFIRM_DELETE_PROMPT):
            return False
        self.deleting.add(transaction_id)
        try:
            self.api.delete(transaction_id)
        except FinanceTrackerError as exc:
            logger.warning(f"Error deleting transaction {transaction_id}: {exc.message}")
            self.error = exc.message
            return False
        finally:
            self.deleting.discard(transaction_id)
        self.transactions = [t for t in self.transactions if t.id != transaction_id]
        self._flash("Transaction deleted successfully!")
        return True
