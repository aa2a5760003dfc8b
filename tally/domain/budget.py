"""Pure functions for budget calculations and logic.

This module contains the functional core for budget operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Spent amounts are always recomputed from the full transaction set.
"""

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from decimal import Decimal

from tally.domain.models import ZERO, CategoryName, Money
from tally.domain.transactions import Transaction, parse_amount


@dataclass(frozen=True)
class BudgetCategory:
    """Immutable budget configuration for a category plus its derived spend."""

    name: CategoryName
    limit: Money
    spent: Money = ZERO
    notifications_enabled: bool = True

    @property
    def available(self) -> Money:
        """Amount left before the limit (negative when overspent)."""
        return Money(self.limit - self.spent)

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.limit


DEFAULT_BUDGETS: tuple[BudgetCategory, ...] = (
    BudgetCategory(CategoryName("Food"), Money(Decimal("800"))),
    BudgetCategory(CategoryName("Transport"), Money(Decimal("500"))),
    BudgetCategory(CategoryName("Entertainment"), Money(Decimal("300"))),
    BudgetCategory(CategoryName("Utilities"), Money(Decimal("600"))),
    BudgetCategory(CategoryName("Others"), Money(Decimal("1000"))),
)


def compute_category_spending(transactions: Iterable[Transaction]) -> dict[CategoryName, Money]:
    """Sum expense amounts per category in a single pass.

    Args:
        transactions: Transactions to aggregate.

    Returns:
        Dictionary of category name to total expense amount.
    """
    spending: defaultdict[CategoryName, Decimal] = defaultdict(Decimal)
    for txn in transactions:
        if txn.is_expense:
            spending[txn.category] += txn.amount
    return {category: Money(total) for category, total in spending.items()}


def recompute_budgets(
    transactions: Iterable[Transaction],
    categories: Sequence[BudgetCategory],
) -> list[BudgetCategory]:
    """Recompute spent for every configured category.

    Categories that only appear on transactions are not created; their spend
    is left out of the result.

    Args:
        transactions: Current transaction set.
        categories: Configured budget categories.

    Returns:
        New list of BudgetCategory objects in configured order.
    """
    spending = compute_category_spending(transactions)
    return [replace(category, spent=spending.get(category.name, ZERO)) for category in categories]


def over_budget_categories(categories: Iterable[BudgetCategory]) -> list[BudgetCategory]:
    """Categories whose spend exceeds their limit."""
    return [category for category in categories if category.is_over_budget]


def unregistered_categories(
    transactions: Iterable[Transaction],
    categories: Iterable[BudgetCategory],
) -> set[CategoryName]:
    """Transaction categories that have no configured budget.

    Expenses in these categories are invisible to the budget overview.
    """
    configured = {category.name for category in categories}
    return {txn.category for txn in transactions} - configured


def find_category(categories: Iterable[BudgetCategory], name: str) -> BudgetCategory | None:
    """Look up a category by exact name."""
    for category in categories:
        if category.name == name:
            return category
    return None


def set_limit(
    categories: Sequence[BudgetCategory],
    name: str,
    raw_limit: object,
) -> tuple[list[BudgetCategory], BudgetCategory | None]:
    """Set a category limit from user input.

    Unparsable or negative input sets the limit to 0.

    Args:
        categories: Configured budget categories.
        name: Category to change.
        raw_limit: New limit as entered.

    Returns:
        Tuple of (new_categories, updated_category); updated_category is None
        and categories are unchanged if no category has that name.
    """
    limit = parse_amount(raw_limit)
    return _update_category(categories, name, lambda c: replace(c, limit=limit if limit is not None else ZERO))


def toggle_notifications(
    categories: Sequence[BudgetCategory],
    name: str,
) -> tuple[list[BudgetCategory], BudgetCategory | None]:
    """Flip the notifications flag of a category.

    Returns:
        Tuple of (new_categories, updated_category), as for set_limit.
    """
    return _update_category(categories, name, lambda c: replace(c, notifications_enabled=not c.notifications_enabled))


def _update_category(
    categories: Sequence[BudgetCategory],
    name: str,
    change: Callable[[BudgetCategory], BudgetCategory],
) -> tuple[list[BudgetCategory], BudgetCategory | None]:
    updated: BudgetCategory | None = None
    result: list[BudgetCategory] = []
    for category in categories:
        if category.name == name:
            category = updated = change(category)
        result.append(category)
    return result, updated


def calculate_budget_percentage(spent: Money, limit: Money) -> float:
    """Calculate percentage of budget used.

    Args:
        spent: Amount spent.
        limit: Budget limit.

    Returns:
        Percentage of budget used (0-100+); 0 when there is no limit.
    """
    if limit <= 0:
        return 0.0
    return float(spent / limit * 100)
