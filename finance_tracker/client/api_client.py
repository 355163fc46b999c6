"""HTTP client for the transactions endpoint, used by the application state controller."""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import pydantic

from finance_tracker.core.errors import ApiError, NetworkError
from finance_tracker.core.models import Transaction
from finance_tracker.core.settings import TRANSACTIONS_PATH, Settings
from finance_tracker.core.utils import get_logger

logger = get_logger("finance-tracker.client")

NETWORK_ERROR_MESSAGE = "Unable to reach the server. Please check your connection."

T = TypeVar("T")


class TransactionsApiClient:
    """Thin wrapper over ``httpx.Client`` for list/create/update/delete calls.

    Any ``httpx.Client`` works, including FastAPI's ``TestClient``. Non-success responses
    and success responses whose body is not the expected JSON raise ``ApiError``; request
    failures raise ``NetworkError``. No retries.
    """

    def __init__(self, http: httpx.Client, path: str = TRANSACTIONS_PATH) -> None:
        """Initialize the client around an existing HTTP session."""
        self.http = http
        self.path = path

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransactionsApiClient":
        """Build a client pointed at ``settings.api_base_url``."""
        return cls(httpx.Client(base_url=settings.api_base_url, timeout=settings.api_timeout))

    def _send(
        self,
        method: str,
        fallback: str,
        parse: Callable[[Any], T],
        payload: dict[str, Any] | None = None,
    ) -> T:
        try:
            response = self.http.request(method, self.path, json=payload)
        except httpx.RequestError as exc:
            logger.warning(f"{method} {self.path} failed: {exc!r}")
            raise NetworkError(NETWORK_ERROR_MESSAGE) from exc
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"{method} {self.path} returned {response.status_code}: {message or fallback}")
            raise ApiError(response.status_code, message or fallback)
        try:
            return parse(response.json())
        except (ValueError, TypeError, AttributeError, pydantic.ValidationError) as exc:
            logger.warning(f"{method} {self.path} returned an unreadable {response.status_code} body: {exc!r}")
            raise ApiError(response.status_code, fallback) from exc

    def fetch_all(self) -> list[Transaction]:
        """Fetch every transaction."""
        return self._send("GET", "Failed to fetch transactions", _parse_transactions)

    def create(self, payload: dict[str, Any]) -> Transaction:
        """Create a transaction and return the stored record."""
        return self._send("POST", "Failed to add transaction", Transaction.model_validate, payload)

    def update(self, transaction_id: str, payload: dict[str, Any]) -> Transaction:
        """Replace a transaction and return the stored record."""
        body = {"id": transaction_id, **payload}
        return self._send("PUT", "Failed to update transaction", Transaction.model_validate, body)

    def delete(self, transaction_id: str) -> str:
        """Delete a transaction and return the server's confirmation message."""
        return self._send("DELETE", "Failed to delete transaction", _parse_message, {"id": transaction_id})

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.http.close()


def _parse_transactions(data: Any) -> list[Transaction]:
    if not isinstance(data, list):
        msg = f"expected a list of transactions, got {type(data).__name__}"
        raise TypeError(msg)
    return [Transaction.model_validate(item) for item in data]


def _parse_message(data: Any) -> str:
    return data.get("message", "")
