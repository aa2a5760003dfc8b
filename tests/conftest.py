"""Shared fixtures for tally tests."""

from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from tally.domain.models import CategoryName, Money, TransactionId, TransactionType
from tally.domain.transactions import Transaction


class FakeClock:
    """Settable clock for code that asks for the current time."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 15, 12, 0))


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Factory for Transaction records with sensible defaults."""
    counter = iter(range(1, 10_000))

    def factory(
        amount: str | int = "10",
        category: str = "Food",
        transaction_type: TransactionType = TransactionType.EXPENSE,
        date: datetime = datetime(2025, 1, 15),
        notes: str = "",
        receipt_ref: str | None = None,
        transaction_id: str | None = None,
    ) -> Transaction:
        return Transaction(
            id=TransactionId(transaction_id or f"t{next(counter)}"),
            amount=Money(Decimal(str(amount))),
            category=CategoryName(category),
            date=date,
            notes=notes,
            receipt_ref=receipt_ref,
            type=transaction_type,
        )

    return factory
