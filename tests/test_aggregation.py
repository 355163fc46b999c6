"""Tests for monthly aggregation and the running balance."""

import datetime as dt

from finance_tracker.core.models import Transaction
from finance_tracker.services.aggregation import current_balance, monthly_summary

CREATED_AT = dt.datetime(2024, 1, 1, tzinfo=dt.UTC)


def make(transaction_id: int, date: str, amount: float) -> Transaction:
    """Build a stored transaction with a type derived from the sign."""
    return Transaction(
        id=str(transaction_id),
        description=f"Transaction {transaction_id}",
        amount=amount,
        date=dt.date.fromisoformat(date),
        type="income" if amount >= 0 else "expense",
        created_at=CREATED_AT,
    )


def test_empty_input_gives_no_buckets() -> None:
    """No transactions, no months."""
    if monthly_summary([]) != []:
        msg = "Expected an empty summary"
        raise AssertionError(msg)


def test_buckets_are_chronological_across_years() -> None:
    """Jan 2023 sorts before Jan 2024 regardless of input order or label text."""
    transactions = [
        make(1, "2024-01-05", 10),
        make(2, "2023-12-20", 20),
        make(3, "2023-01-02", 30),
        make(4, "2024-02-14", -5),
    ]
    keys = [(bucket.year, bucket.month) for bucket in monthly_summary(transactions)]
    if keys != [(2023, 1), (2023, 12), (2024, 1), (2024, 2)]:
        msg = f"Unexpected bucket order {keys}"
        raise AssertionError(msg)
    labels = [bucket.label for bucket in monthly_summary(transactions)]
    if labels != ["Jan 2023", "Dec 2023", "Jan 2024", "Feb 2024"]:
        msg = f"Unexpected labels {labels}"
        raise AssertionError(msg)


def test_bucket_sums() -> None:
    """Income sums positives, expenses sums absolute negatives, net is the difference."""
    transactions = [
        make(1, "2024-03-01", 1000),
        make(2, "2024-03-15", -250.5),
        make(3, "2024-03-31", -49.5),
        make(4, "2024-03-10", 0),
    ]
    (bucket,) = monthly_summary(transactions)
    if (bucket.income, bucket.expenses, bucket.net) != (1000, 300, 700):
        msg = f"Unexpected sums {bucket}"
        raise AssertionError(msg)


def test_net_and_non_negative_invariants() -> None:
    """Every bucket has non-negative income/expenses and net = income - expenses."""
    transactions = [make(i, f"202{i % 3}-0{i % 9 + 1}-15", (-1) ** i * i * 12.5) for i in range(1, 40)]
    for bucket in monthly_summary(transactions):
        if bucket.income < 0 or bucket.expenses < 0:
            msg = f"Negative totals in {bucket}"
            raise AssertionError(msg)
        if bucket.net != bucket.income - bucket.expenses:
            msg = f"Net mismatch in {bucket}"
            raise AssertionError(msg)


def test_current_balance() -> None:
    """The balance is the sum of signed amounts."""
    transactions = [make(1, "2024-03-01", 100), make(2, "2024-03-02", -40.25)]
    if current_balance(transactions) != 59.75:
        msg = f"Unexpected balance {current_balance(transactions)}"
        raise AssertionError(msg)
    if current_balance([]) != 0:
        msg = "Expected a zero balance for no transactions"
        raise AssertionError(msg)
