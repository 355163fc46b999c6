"""Core package: provides models, errors, database handle, settings, and shared utilities."""

from .db import Database  # noqa: F401
from .errors import (  # noqa: F401
    ApiError,
    FinanceTrackerError,
    NetworkError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .models import MonthlySummary, Transaction, TransactionType  # noqa: F401
from .settings import Settings  # noqa: F401
from .utils import get_logger  # noqa: F401
