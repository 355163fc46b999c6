"""Client package: HTTP API client, application state controller and presentation helpers."""

from .api_client import TransactionsApiClient  # noqa: F401
from .controller import EditMode, TransactionController  # noqa: F401
from .presentation import TransactionForm, validate_form  # noqa: F401
