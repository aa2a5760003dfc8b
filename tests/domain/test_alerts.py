"""Tests for tally.domain.alerts."""

from datetime import datetime, timedelta
from decimal import Decimal

from tally.domain.alerts import AlertState, LossDetector, describe_loss_alert, total_overspend
from tally.domain.budget import BudgetCategory
from tally.domain.models import CategoryName, Money
from tally.domain.report import LedgerSummary

T0 = datetime(2025, 6, 15, 12, 0)


def summary(income: str, expenses: str) -> LedgerSummary:
    return LedgerSummary(
        income=Money(Decimal(income)),
        expenses=Money(Decimal(expenses)),
        savings=Decimal(income) - Decimal(expenses),
    )


def category(name: str, limit: str, spent: str) -> BudgetCategory:
    return BudgetCategory(CategoryName(name), Money(Decimal(limit)), Money(Decimal(spent)))


class TestLossDetector:
    """Tests for the LossDetector state machine."""

    def test_starts_clear(self) -> None:
        """Should have no alert before any loss."""
        detector = LossDetector()
        assert detector.state is AlertState.CLEAR
        assert detector.current(T0) is None

    def test_no_alert_when_break_even(self) -> None:
        """Should stay clear when savings are exactly zero."""
        detector = LossDetector()
        assert detector.evaluate(summary("100", "100"), [], T0) is None
        assert detector.state is AlertState.CLEAR

    def test_loss_raises_alert_with_snapshot(self) -> None:
        """Should snapshot loss amount and over-budget categories on entry."""
        detector = LossDetector(timedelta(seconds=5))
        categories = [category("Food", "800", "900"), category("Transport", "500", "10")]

        alert = detector.evaluate(summary("500", "700"), categories, T0)

        assert alert is not None
        assert alert.active
        assert alert.total_loss_amount == Decimal("200")
        assert [c.name for c in alert.over_budget_categories] == ["Food"]
        assert alert.created_at == T0
        assert alert.ttl == timedelta(seconds=5)
        assert detector.state is AlertState.ALERTING

    def test_alerting_refreshes_amount_but_not_causes(self) -> None:
        """Should update the loss but keep the first snapshot of causes."""
        detector = LossDetector()
        detector.evaluate(summary("500", "700"), [category("Food", "100", "200")], T0)

        alert = detector.evaluate(
            summary("0", "700"), [category("Transport", "1", "50")], T0 + timedelta(seconds=1)
        )

        assert alert is not None
        assert alert.total_loss_amount == Decimal("700")
        assert [c.name for c in alert.over_budget_categories] == ["Food"]
        assert alert.created_at == T0

    def test_recovery_clears(self) -> None:
        """Should clear as soon as savings are no longer negative."""
        detector = LossDetector()
        detector.evaluate(summary("0", "10"), [], T0)
        assert detector.evaluate(summary("10", "10"), [], T0) is None
        assert detector.state is AlertState.CLEAR

    def test_ttl_expiry(self) -> None:
        """Should drop the alert once its TTL has passed."""
        detector = LossDetector(timedelta(seconds=5))
        detector.evaluate(summary("0", "10"), [], T0)

        assert detector.current(T0 + timedelta(seconds=4)) is not None
        assert detector.current(T0 + timedelta(seconds=5)) is None
        assert detector.state is AlertState.CLEAR

    def test_fresh_alert_after_expiry(self) -> None:
        """Should take a new snapshot on the next loss after expiry."""
        detector = LossDetector(timedelta(seconds=5))
        detector.evaluate(summary("0", "10"), [], T0)
        later = T0 + timedelta(seconds=10)

        alert = detector.evaluate(summary("0", "20"), [category("Food", "5", "20")], later)

        assert alert is not None
        assert alert.created_at == later
        assert [c.name for c in alert.over_budget_categories] == ["Food"]

    def test_dismiss(self) -> None:
        """Should clear on dismiss."""
        detector = LossDetector()
        detector.evaluate(summary("0", "10"), [], T0)
        detector.dismiss()
        assert detector.current(T0) is None


class TestDescribeLossAlert:
    """Tests for describe_loss_alert and total_overspend."""

    def test_with_overspending(self) -> None:
        """Should name each overspent category with spent and limit."""
        detector = LossDetector()
        alert = detector.evaluate(summary("500", "1200"), [category("Food", "800", "1000")], T0)
        assert alert is not None

        message = describe_loss_alert(alert)

        assert message.startswith("You are in a loss of $700.00.")
        assert "Overspending in: Food (Spent: $1,000.00, Limit: $800.00)" in message
        assert "Reduce spending in these categories." in message
        assert total_overspend(alert) == Decimal("200")

    def test_without_overspending(self) -> None:
        """Should blame expenses exceeding income."""
        detector = LossDetector()
        alert = detector.evaluate(summary("500", "700"), [category("Food", "800", "700")], T0)
        assert alert is not None

        message = describe_loss_alert(alert)

        assert "Expenses exceed income." in message
        assert "Cut unnecessary expenses." in message
        assert total_overspend(alert) == Decimal("0")
