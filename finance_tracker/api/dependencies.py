"""FastAPI dependencies for DI (database, store, transaction service).

The database handle lives on ``app.state`` for the lifetime of the application; each
request gets a store and a service bound to it, so tests can swap the store through
``app.dependency_overrides[get_store]``.
"""

from fastapi import Depends, Request

from finance_tracker.core.db import Database
from finance_tracker.services.store import SqlTransactionStore, TransactionStore
from finance_tracker.services.transactions import TransactionService


def get_database(request: Request) -> Database:
    """Provide the application's lazily-connected database handle."""
    return request.app.state.database


def get_store(database: Database = Depends(get_database)) -> TransactionStore:
    """Provide the transaction store for dependency injection."""
    return SqlTransactionStore(database)


def get_transaction_service(store: TransactionStore = Depends(get_store)) -> TransactionService:
    """Provide a TransactionService instance for dependency injection."""
    return TransactionService(store)
