"""Pure functions for transaction input normalization.

This module contains the functional core for transaction input:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Amounts are non-negative Decimals; direction is carried by TransactionType.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, TypedDict

from tally.dates import parse_date
from tally.domain.models import ZERO, CategoryName, Money, TransactionId, TransactionType

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("1e15")

DEFAULT_CATEGORY = CategoryName("Others")


class InvalidTransactionType(ValueError):
    """Raised when a transaction type is neither income nor expense."""


class RawTransaction(TypedDict, total=False):
    """Unvalidated transaction input as a form or API caller supplies it."""

    amount: Any
    category: str | None
    date: Any
    notes: str | None
    receipt_ref: str | None
    type: str | TransactionType


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record, replaced wholesale on update."""

    id: TransactionId
    amount: Money
    category: CategoryName
    date: datetime
    notes: str
    receipt_ref: str | None
    type: TransactionType

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE


@dataclass(frozen=True)
class NormalizedInput:
    """Validated transaction fields plus which of them were defaulted."""

    amount: Money
    category: CategoryName
    date: datetime
    notes: str
    receipt_ref: str | None
    type: TransactionType
    amount_defaulted: bool = False
    category_defaulted: bool = False
    date_defaulted: bool = False

    def to_transaction(self, transaction_id: TransactionId) -> Transaction:
        """Attach an id to the normalized fields."""
        return Transaction(
            id=transaction_id,
            amount=self.amount,
            category=self.category,
            date=self.date,
            notes=self.notes,
            receipt_ref=self.receipt_ref,
            type=self.type,
        )


@dataclass(frozen=True)
class NotFoundError:
    """Result returned when an operation targets an id that does not exist."""

    key: str
    kind: str = "transaction"

    @property
    def message(self) -> str:
        return f"{self.kind.capitalize()} {self.key} not found"


def parse_amount(raw: Any) -> Money | None:
    """Parse a user-entered amount.

    Amounts are rounded to cents. Anything from MAX_AMOUNT up is treated as
    unusable so totals stay exact.

    Args:
        raw: Number or string, optionally with a currency symbol and thousands separators.

    Returns:
        Non-negative Money, or None if the input is not a usable amount.
    """
    if raw is None or isinstance(raw, bool):
        return None

    text = str(raw).strip().replace("£", "").replace("$", "").replace(",", "")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None

    if not amount.is_finite() or amount < 0 or amount >= MAX_AMOUNT:
        return None
    # "-0" parses as a signed zero
    return Money(abs(amount.quantize(CENTS, rounding=ROUND_HALF_UP)))


def normalize_category(raw: str | None) -> CategoryName | None:
    """Trim a category label, returning None when nothing is left."""
    if raw is None:
        return None
    name = str(raw).strip()
    return CategoryName(name) if name else None


def parse_transaction_type(raw: str | TransactionType | None) -> TransactionType:
    """Parse a transaction type.

    Raises:
        InvalidTransactionType: If the value is not income or expense.
    """
    if isinstance(raw, TransactionType):
        return raw
    if raw is not None:
        try:
            return TransactionType(str(raw).strip().lower())
        except ValueError:
            pass
    raise InvalidTransactionType(f"Transaction type must be 'income' or 'expense', got {raw!r}")


def normalize(raw: Mapping[str, Any], now: datetime) -> NormalizedInput:
    """Normalize raw transaction input.

    Invalid or missing values are replaced, never rejected:
    - amount: unparsable or negative becomes 0
    - category: empty becomes "Others"
    - date: missing or unparsable becomes now
    - notes/receipt_ref: missing become "" and None

    Args:
        raw: Raw input fields.
        now: Current time, used when no date is given.

    Returns:
        NormalizedInput with the substitutions flagged.

    Raises:
        InvalidTransactionType: If type is missing or not income/expense.
    """
    transaction_type = parse_transaction_type(raw.get("type"))

    amount = parse_amount(raw.get("amount"))
    category = normalize_category(raw.get("category"))
    when = parse_date(raw.get("date"))

    return NormalizedInput(
        amount=amount if amount is not None else ZERO,
        category=category if category is not None else DEFAULT_CATEGORY,
        date=when if when is not None else now,
        notes=str(raw.get("notes") or ""),
        receipt_ref=raw.get("receipt_ref") or None,
        type=transaction_type,
        amount_defaulted=amount is None,
        category_defaulted=category is None,
        date_defaulted=when is None,
    )


def to_raw(transaction: Transaction) -> RawTransaction:
    """Convert a stored transaction back into raw input fields."""
    return RawTransaction(
        amount=transaction.amount,
        category=transaction.category,
        date=transaction.date,
        notes=transaction.notes,
        receipt_ref=transaction.receipt_ref,
        type=transaction.type,
    )


def merge_patch(existing: Transaction, patch: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay a raw patch on an existing transaction's fields.

    Keys absent from the patch keep their current value; keys present replace it
    and are normalized again exactly as on creation.
    """
    merged: dict[str, Any] = dict(to_raw(existing))
    merged.update({key: value for key, value in patch.items() if key in RawTransaction.__annotations__})
    return merged


def format_money_display(amount: Money, transaction_type: TransactionType | None = None) -> str:
    """Format money amount for display.

    Args:
        amount: Amount to format.
        transaction_type: If given, prefix with + for income and - for expense.

    Returns:
        Formatted string (e.g., "-$123.45" or "$123.45").
    """
    formatted = f"${amount:,.2f}"

    if transaction_type is TransactionType.INCOME:
        return f"+{formatted}"
    if transaction_type is TransactionType.EXPENSE:
        return f"-{formatted}"
    return formatted
