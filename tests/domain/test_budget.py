"""Tests for tally.domain.budget pure functions."""

from decimal import Decimal

from tally.domain.budget import (
    DEFAULT_BUDGETS,
    BudgetCategory,
    calculate_budget_percentage,
    compute_category_spending,
    find_category,
    over_budget_categories,
    recompute_budgets,
    set_limit,
    toggle_notifications,
    unregistered_categories,
)
from tally.domain.models import CategoryName, Money, TransactionType


def budget(name: str, limit: str, spent: str = "0") -> BudgetCategory:
    return BudgetCategory(CategoryName(name), Money(Decimal(limit)), Money(Decimal(spent)))


class TestComputeCategorySpending:
    """Tests for compute_category_spending."""

    def test_sums_expenses_per_category(self, make_txn) -> None:
        """Should add up expenses by category."""
        spending = compute_category_spending(
            [make_txn("150", "Food"), make_txn("20.50", "Food"), make_txn("30", "Transport")]
        )
        assert spending == {"Food": Decimal("170.50"), "Transport": Decimal("30")}

    def test_ignores_income(self, make_txn) -> None:
        """Should leave income out of spending."""
        spending = compute_category_spending([make_txn("1000", "Food", TransactionType.INCOME)])
        assert spending == {}


class TestRecomputeBudgets:
    """Tests for recompute_budgets."""

    def test_sets_spent_for_configured_categories(self, make_txn) -> None:
        """Should set spent to the expense total of each category."""
        result = recompute_budgets(
            [make_txn("150", "Food"), make_txn("45", "Transport")],
            [budget("Food", "800"), budget("Transport", "500"), budget("Utilities", "600")],
        )
        assert [(b.name, b.spent) for b in result] == [
            ("Food", Decimal("150")),
            ("Transport", Decimal("45")),
            ("Utilities", Decimal("0")),
        ]

    def test_replaces_stale_spent(self, make_txn) -> None:
        """Should recompute rather than add to a previous spent value."""
        result = recompute_budgets([make_txn("10", "Food")], [budget("Food", "800", spent="999")])
        assert result[0].spent == Decimal("10")

    def test_unconfigured_categories_not_created(self, make_txn) -> None:
        """Should not add categories that only transactions mention."""
        result = recompute_budgets([make_txn("99", "Pets")], [budget("Food", "800")])
        assert [b.name for b in result] == ["Food"]
        assert result[0].spent == Decimal("0")

    def test_keeps_configuration(self, make_txn) -> None:
        """Should keep limit and notifications untouched."""
        configured = BudgetCategory(CategoryName("Food"), Money(Decimal("800")), notifications_enabled=False)
        result = recompute_budgets([make_txn("5", "Food")], [configured])
        assert result[0].limit == Decimal("800")
        assert result[0].notifications_enabled is False


class TestOverBudgetAndGaps:
    """Tests for over_budget_categories and unregistered_categories."""

    def test_over_budget_is_strictly_greater(self) -> None:
        """Should flag spend above the limit but not spend equal to it."""
        categories = [budget("Food", "100", "100"), budget("Fun", "50", "50.01")]
        assert [b.name for b in over_budget_categories(categories)] == ["Fun"]

    def test_available(self) -> None:
        """Should report remaining and overspent amounts."""
        assert budget("Food", "100", "30").available == Decimal("70")
        assert budget("Food", "100", "130").available == Decimal("-30")

    def test_unregistered_categories(self, make_txn) -> None:
        """Should list transaction categories missing from the budget."""
        transactions = [make_txn(category="Food"), make_txn(category="Pets"), make_txn(category="Gifts")]
        assert unregistered_categories(transactions, [budget("Food", "1")]) == {"Pets", "Gifts"}


class TestBudgetEdits:
    """Tests for set_limit and toggle_notifications."""

    def test_set_limit(self) -> None:
        """Should change only the named category."""
        categories, updated = set_limit(list(DEFAULT_BUDGETS), "Food", "950")
        assert updated is not None and updated.limit == Decimal("950")
        assert find_category(categories, "Food") == updated
        assert find_category(categories, "Transport") == DEFAULT_BUDGETS[1]

    def test_set_limit_invalid_input_is_zero(self) -> None:
        """Should set the limit to 0 for unparsable input."""
        _, updated = set_limit(list(DEFAULT_BUDGETS), "Food", "lots")
        assert updated is not None and updated.limit == Decimal("0")

    def test_set_limit_unknown_category(self) -> None:
        """Should return None and leave categories unchanged."""
        categories, updated = set_limit(list(DEFAULT_BUDGETS), "Pets", "10")
        assert updated is None
        assert categories == list(DEFAULT_BUDGETS)

    def test_toggle_notifications(self) -> None:
        """Should flip the flag each time."""
        categories, updated = toggle_notifications(list(DEFAULT_BUDGETS), "Transport")
        assert updated is not None and updated.notifications_enabled is False
        _, again = toggle_notifications(categories, "Transport")
        assert again is not None and again.notifications_enabled is True


class TestCalculateBudgetPercentage:
    """Tests for calculate_budget_percentage."""

    def test_percentage(self) -> None:
        """Should give spend as a percentage of the limit."""
        assert calculate_budget_percentage(Money(Decimal("150")), Money(Decimal("600"))) == 25.0

    def test_no_limit(self) -> None:
        """Should return 0 when the limit is 0."""
        assert calculate_budget_percentage(Money(Decimal("10")), Money(Decimal("0"))) == 0.0
