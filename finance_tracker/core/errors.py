"""Error taxonomy shared by the API, the store and the client controller.

Every error carries a human-readable ``message`` and the HTTP status the API
layer answers with. The API turns them into ``{"error": message}`` bodies; the
client controller turns them into the message shown to the user.
"""


class FinanceTrackerError(Exception):
    """Base class for all Personal Finance Tracker errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        """Initialize the error with a user-facing message."""
        super().__init__(message)
        self.message = message


class ValidationError(FinanceTrackerError):
    """Missing or malformed input. User-correctable."""

    status_code = 400


class NotFoundError(FinanceTrackerError):
    """The target transaction does not exist."""

    status_code = 404


class StoreError(FinanceTrackerError):
    """The transaction store failed (connectivity, driver or query error)."""

    status_code = 500


class ApiError(FinanceTrackerError):
    """A non-success response received by the client from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        """Initialize with the response status and the server's error message."""
        super().__init__(message)
        self.status_code = status_code


class NetworkError(FinanceTrackerError):
    """The client could not reach the API at all."""

    status_code = 503
