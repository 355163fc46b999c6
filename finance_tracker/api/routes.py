"""FastAPI endpoints for the Personal Finance Tracker API.

This module defines the single transactions resource (list, create, replace and delete on
one path) and the health check. Validation and persistence live in the transaction
service; failures are rendered by the handlers in ``finance_tracker.api.errors``.
"""

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_transaction_service
from finance_tracker.core.models import (
    DeleteConfirmation,
    ErrorResponse,
    Transaction,
    TransactionDeleteIn,
    TransactionIn,
    TransactionUpdateIn,
)
from finance_tracker.core.settings import TRANSACTIONS_PATH
from finance_tracker.services.transactions import TransactionService

router = APIRouter()

TRANSACTION_EXAMPLE = {
    "id": "42",
    "description": "Coffee",
    "amount": -4.5,
    "category": "General",
    "date": "2024-03-01",
    "type": "expense",
    "createdAt": "2024-03-01T08:15:00Z",
    "updatedAt": None,
}


def _error(description: str, message: str) -> dict:
    return {
        "model": ErrorResponse,
        "description": description,
        "content": {"application/json": {"example": {"error": message}}},
    }


@router.get(
    TRANSACTIONS_PATH,
    response_model=list[Transaction],
    summary="List transactions",
    description=(
        "Return every transaction ordered by date, most recent first. "
        "Transactions on the same date are ordered by id, newest first.\n\n"
        "**Response:**\n"
        "- 200 OK: array of transactions.\n"
        "- 500 Internal Server Error: the transaction store is unavailable."
    ),
    responses={
        200: {"content": {"application/json": {"example": [TRANSACTION_EXAMPLE]}}},
        500: _error("Store failure.", "Failed to fetch transactions"),
    },
)
def list_transactions(service: TransactionService = Depends(get_transaction_service)) -> list[Transaction]:
    """List all transactions."""
    return service.list_transactions()


@router.post(
    TRANSACTIONS_PATH,
    status_code=201,
    response_model=Transaction,
    summary="Create a transaction",
    description=(
        "Create a transaction from `description`, `amount` and `date`. "
        "`category` defaults to `General`; `type` defaults to `income` for amounts >= 0 "
        "and `expense` otherwise.\n\n"
        "**Response:**\n"
        "- 201 Created: the stored transaction with its assigned `id`.\n"
        "- 400 Bad Request: missing fields or an invalid amount/date/type.\n"
        "- 500 Internal Server Error: the transaction store is unavailable."
    ),
    responses={
        201: {"content": {"application/json": {"example": TRANSACTION_EXAMPLE}}},
        400: _error("Invalid input.", "Missing required fields: description, amount, date"),
        500: _error("Store failure.", "Failed to add transaction"),
    },
)
def create_transaction(
    payload: TransactionIn,
    service: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    """Create a transaction."""
    return service.create_transaction(payload)


@router.put(
    TRANSACTIONS_PATH,
    response_model=Transaction,
    summary="Replace a transaction",
    description=(
        "Replace every editable field of the transaction identified by `id`. "
        "Partial updates are not supported; omitted optional fields fall back to their defaults.\n\n"
        "**Response:**\n"
        "- 200 OK: the updated transaction.\n"
        "- 400 Bad Request: missing or malformed `id`, or invalid fields.\n"
        "- 404 Not Found: no transaction has that `id`.\n"
        "- 500 Internal Server Error: the transaction store is unavailable."
    ),
    responses={
        400: _error("Invalid input.", "Invalid transaction ID"),
        404: _error("Transaction not found.", "Transaction not found"),
        500: _error("Store failure.", "Failed to update transaction"),
    },
)
def update_transaction(
    payload: TransactionUpdateIn,
    service: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    """Replace a transaction."""
    return service.update_transaction(payload)


@router.delete(
    TRANSACTIONS_PATH,
    response_model=DeleteConfirmation,
    summary="Delete a transaction",
    description=(
        "Permanently delete the transaction identified by `id` in the JSON body.\n\n"
        "**Response:**\n"
        "- 200 OK: `{ 'message': 'Transaction deleted successfully' }`.\n"
        "- 400 Bad Request: missing or malformed `id`.\n"
        "- 404 Not Found: no transaction has that `id`.\n"
        "- 500 Internal Server Error: the transaction store is unavailable."
    ),
    responses={
        400: _error("Invalid input.", "Transaction ID is required"),
        404: _error("Transaction not found.", "Transaction not found"),
        500: _error("Store failure.", "Failed to delete transaction"),
    },
)
def delete_transaction(
    payload: TransactionDeleteIn,
    service: TransactionService = Depends(get_transaction_service),
) -> DeleteConfirmation:
    """Delete a transaction."""
    return service.delete_transaction(payload)


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
