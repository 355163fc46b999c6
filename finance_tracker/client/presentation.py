"""Form validation and display formatting for the transaction form, list and chart."""

import datetime as dt
import math
from calendar import month_abbr
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

from finance_tracker.core.models import Transaction
from finance_tracker.services.aggregation import monthly_summary

MIN_DESCRIPTION_LENGTH = 3


class TransactionForm(BaseModel):
    """Raw values of the create/edit form, as typed by the user."""

    amount: str = ""
    date: str = Field(default_factory=lambda: dt.date.today().isoformat())
    description: str = ""
    category: str = ""


def validate_form(form: TransactionForm) -> dict[str, str]:
    """Return field errors keyed by field name; an empty dict means the form is valid."""
    errors: dict[str, str] = {}

    amount = form.amount.strip()
    if not amount:
        errors["amount"] = "Amount is required"
    else:
        try:
            value = float(amount)
        except ValueError:
            value = 0.0
        if value == 0 or not math.isfinite(value):
            errors["amount"] = "Amount must be a valid number"

    if not form.date.strip():
        errors["date"] = "Date is required"
    else:
        try:
            dt.date.fromisoformat(form.date.strip())
        except ValueError:
            errors["date"] = "Date must be a valid date"

    description = form.description.strip()
    if not description:
        errors["description"] = "Description is required"
    elif len(description) < MIN_DESCRIPTION_LENGTH:
        errors["description"] = f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"

    return errors


def form_to_payload(form: TransactionForm) -> dict[str, Any]:
    """Convert a validated form into a request body."""
    payload: dict[str, Any] = {
        "description": form.description.strip(),
        "amount": float(form.amount.strip()),
        "date": form.date.strip(),
    }
    if form.category.strip():
        payload["category"] = form.category.strip()
    return payload


def form_from_transaction(transaction: Transaction) -> TransactionForm:
    """Prefill the form for editing an existing transaction."""
    return TransactionForm(
        amount=str(transaction.amount),
        date=transaction.date.isoformat(),
        description=transaction.description,
        category=transaction.category,
    )


def format_amount(amount: float) -> str:
    """Signed USD amount, e.g. ``+$1,234.50`` or ``-$4.50``."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: dt.date) -> str:
    """Short display date, e.g. ``Mar 1, 2024``."""
    return f"{month_abbr[value.month]} {value.day}, {value.year}"


def chart_rows(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    """Rows for the monthly income/expenses/net bar chart, oldest month first."""
    return [
        {
            "month": bucket.label,
            "income": round(bucket.income, 2),
            "expenses": round(bucket.expenses, 2),
            "net": round(bucket.net, 2),
        }
        for bucket in monthly_summary(transactions)
    ]
