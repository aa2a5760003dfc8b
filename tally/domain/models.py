"""Domain type definitions for tally.

These NewTypes provide semantic clarity and help with type checking:
- Money: Non-negative decimal amount (sign lives in TransactionType)
- Month: Month in YYYY-MM format
- CategoryName: Name of a budget category
- TransactionId: Identifier assigned by the store on creation
"""

from decimal import Decimal
from enum import Enum
from typing import NewType

# Money amounts are Decimals to keep sums exact
Money = NewType("Money", Decimal)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Category name for budget categories
CategoryName = NewType("CategoryName", str)

TransactionId = NewType("TransactionId", str)

ZERO = Money(Decimal("0"))


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"
