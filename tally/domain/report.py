"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

The monthly series covers a fixed calendar window. Transactions dated outside
it are left out of the series and nowhere else.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from tally.dates import month_index, month_label, window_months
from tally.domain.budget import BudgetCategory
from tally.domain.models import ZERO, CategoryName, Money, Month
from tally.domain.transactions import Transaction, parse_amount

DEFAULT_CHART_PLACEHOLDER = Decimal("0.01")


@dataclass(frozen=True)
class TimeSeriesBucket:
    """Immutable income/expense totals for one month of the window."""

    index: int
    month: Month
    label: str
    income_sum: Money = ZERO
    expense_sum: Money = ZERO


@dataclass(frozen=True)
class CategoryBreakdownEntry:
    """Immutable category slice for proportional charts."""

    name: CategoryName
    amount: Decimal


@dataclass(frozen=True)
class LedgerSummary:
    """Immutable income, expense and savings totals."""

    income: Money
    expenses: Money
    savings: Decimal

    @property
    def is_loss(self) -> bool:
        return self.savings < 0


def project_monthly_series(
    transactions: Iterable[Transaction],
    window_start: Month,
    months: int,
) -> list[TimeSeriesBucket]:
    """Bucket transactions into the months of a fixed window.

    Args:
        transactions: Transactions to project.
        window_start: First month of the window (YYYY-MM).
        months: Number of months in the window.

    Returns:
        One TimeSeriesBucket per month, oldest first.
    """
    income = [Decimal(0)] * months
    expense = [Decimal(0)] * months

    for txn in transactions:
        index = month_index(txn.date, window_start)
        if not 0 <= index < months:
            continue
        if txn.is_income:
            income[index] += txn.amount
        else:
            expense[index] += txn.amount

    return [
        TimeSeriesBucket(
            index=index,
            month=month,
            label=month_label(month),
            income_sum=Money(income[index]),
            expense_sum=Money(expense[index]),
        )
        for index, month in enumerate(window_months(window_start, months))
    ]


def monthly_expense_bars(buckets: Sequence[TimeSeriesBucket]) -> list[tuple[str, Money]]:
    """Expense-only (label, amount) pairs for a bar chart."""
    return [(bucket.label, bucket.expense_sum) for bucket in buckets]


def project_category_breakdown(categories: Iterable[BudgetCategory]) -> list[CategoryBreakdownEntry]:
    """Build breakdown entries from the categories' recomputed spend."""
    return [CategoryBreakdownEntry(name=category.name, amount=category.spent) for category in categories]


def project_category_activity(
    transactions: Iterable[Transaction],
    categories: Iterable[BudgetCategory],
) -> list[CategoryBreakdownEntry]:
    """Build breakdown entries of net activity (income minus expense) per category.

    Args:
        transactions: Current transaction set.
        categories: Configured budget categories (sets the entries and their order).

    Returns:
        One entry per configured category.
    """
    net: defaultdict[CategoryName, Decimal] = defaultdict(Decimal)
    for txn in transactions:
        net[txn.category] += txn.amount if txn.is_income else -txn.amount
    return [CategoryBreakdownEntry(name=category.name, amount=net[category.name]) for category in categories]


def chart_slices(
    entries: Iterable[CategoryBreakdownEntry],
    placeholder: Decimal = DEFAULT_CHART_PLACEHOLDER,
) -> list[CategoryBreakdownEntry]:
    """Prepare breakdown entries for a pie chart.

    Charting needs a positive value for every slice, so zero and negative
    amounts are replaced by placeholder. The input entries are not modified.
    """
    return [
        entry if entry.amount > 0 else CategoryBreakdownEntry(name=entry.name, amount=placeholder)
        for entry in entries
    ]


def compute_summary(transactions: Iterable[Transaction]) -> LedgerSummary:
    """Total income and expenses and the resulting savings."""
    income = Decimal(0)
    expenses = Decimal(0)
    for txn in transactions:
        if txn.is_income:
            income += txn.amount
        else:
            expenses += txn.amount
    return LedgerSummary(income=Money(income), expenses=Money(expenses), savings=income - expenses)


def calculate_savings(raw_income: object, raw_expenses: object) -> Decimal:
    """Savings calculator over user-entered totals.

    Unparsable inputs count as 0, as they do for transaction amounts.
    """
    income = parse_amount(raw_income) or ZERO
    expenses = parse_amount(raw_expenses) or ZERO
    return income - expenses


def calculate_histogram_bar_length(
    amount: Decimal,
    max_amount: Decimal,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int(abs(amount) / max_amount * bar_width)
