"""Monthly aggregation of transactions for the income/expenses chart."""

from collections.abc import Iterable

from finance_tracker.core.models import MonthlySummary, Transaction


def monthly_summary(transactions: Iterable[Transaction]) -> list[MonthlySummary]:
    """Bucket transactions by calendar month.

    Positive amounts count as income, negative amounts as expenses (absolute value),
    and ``net = income - expenses``. Buckets come back in chronological order of
    (year, month) whatever the input order; empty input gives an empty list.
    """
    buckets: dict[tuple[int, int], MonthlySummary] = {}
    for transaction in transactions:
        key = (transaction.date.year, transaction.date.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlySummary(year=key[0], month=key[1])
        if transaction.amount > 0:
            bucket.income += transaction.amount
        else:
            bucket.expenses += abs(transaction.amount)
    for bucket in buckets.values():
        bucket.net = bucket.income - bucket.expenses
    return [buckets[key] for key in sorted(buckets)]


def current_balance(transactions: Iterable[Transaction]) -> float:
    """Sum of all signed amounts."""
    return sum((transaction.amount for transaction in transactions), 0.0)
