"""Pydantic models for the Personal Finance Tracker.

This module defines the request bodies accepted by the transactions endpoint, the
Transaction wire model returned by it, and the monthly summary produced for the chart.
Request bodies are deliberately loose: field rules live in the transaction service so
that every failure maps onto the same ``{"error": ...}`` messages.
"""

import datetime as dt
from calendar import month_abbr
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(StrEnum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionIn(BaseModel):
    """Request body for creating a transaction."""

    description: str | None = None
    amount: Any = None
    category: str | None = None
    date: Any = None
    type: str | None = None


class TransactionUpdateIn(TransactionIn):
    """Request body for replacing a transaction."""

    id: Any = None


class TransactionDeleteIn(BaseModel):
    """Request body for deleting a transaction."""

    id: Any = None


class TransactionDraft(BaseModel):
    """Validated, normalized transaction fields ready to be written to the store."""

    description: str
    amount: float
    category: str
    date: dt.date
    type: TransactionType


class Transaction(BaseModel):
    """Pydantic model representing a stored transaction, as sent over the wire."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    description: str
    amount: float
    category: str = "General"
    date: dt.date
    type: TransactionType
    created_at: dt.datetime = Field(alias="createdAt")
    updated_at: dt.datetime | None = Field(default=None, alias="updatedAt")


class DeleteConfirmation(BaseModel):
    """Response body for a successful delete."""

    message: str


class ErrorResponse(BaseModel):
    """Response body for every failed request."""

    error: str


class MonthlySummary(BaseModel):
    """Income, expenses and net balance for one calendar month."""

    year: int
    month: int
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0

    @property
    def label(self) -> str:
        """Short display label, e.g. ``Mar 2024``."""
        return f"{month_abbr[self.month]} {self.year}"
