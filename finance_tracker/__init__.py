"""Personal Finance Tracker: transaction CRUD API, monthly aggregation and client controller."""

__version__ = "1.0.0"
