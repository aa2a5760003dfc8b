"""Pure filtering and sorting of transactions for list views."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from tally.dates import day_bounds
from tally.domain.transactions import Transaction


@dataclass(frozen=True)
class TransactionFilter:
    """Immutable filter for transaction queries.

    Empty text filters match everything. Date bounds are inclusive and either
    side may be left open.
    """

    category: str = ""
    notes: str = ""
    start: date | datetime | None = None
    end: date | datetime | None = None


def matches(txn: Transaction, flt: TransactionFilter, start: datetime | None, end: datetime | None) -> bool:
    """Check one transaction against a filter with resolved date bounds."""
    if flt.category and flt.category.lower() not in txn.category.lower():
        return False
    if start is not None and txn.date < start:
        return False
    if end is not None and txn.date > end:
        return False
    if flt.notes and flt.notes.lower() not in txn.notes.lower():
        return False
    return True


def query_transactions(
    transactions: Iterable[Transaction],
    flt: TransactionFilter | None = None,
) -> list[Transaction]:
    """Filter transactions and sort them newest first.

    Args:
        transactions: Transactions in insertion order.
        flt: Filter to apply; None matches everything.

    Returns:
        New list sorted by date descending. Transactions with the same date
        keep their insertion order.
    """
    flt = flt or TransactionFilter()
    start, end = day_bounds(flt.start, flt.end)
    selected = [txn for txn in transactions if matches(txn, flt, start, end)]
    return sorted(selected, key=lambda txn: txn.date, reverse=True)
