"""Loss detection with a transient, self-expiring alert.

The detector is a two-state machine (CLEAR, ALERTING) driven by the engine's
recomputation. Time is passed in by the caller so the detector does no I/O.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from tally.domain.budget import BudgetCategory, over_budget_categories
from tally.domain.models import Money
from tally.domain.report import LedgerSummary

logger = logging.getLogger(__name__)

DEFAULT_ALERT_TTL = timedelta(seconds=5)


class AlertState(str, Enum):
    CLEAR = "clear"
    ALERTING = "alerting"


@dataclass(frozen=True)
class LossAlert:
    """Immutable snapshot of a loss alert."""

    active: bool
    total_loss_amount: Money
    over_budget_categories: tuple[BudgetCategory, ...]
    created_at: datetime
    ttl: timedelta

    @property
    def expires_at(self) -> datetime:
        return self.created_at + self.ttl

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class LossDetector:
    """Tracks whether the ledger is running at a loss.

    Entering ALERTING snapshots the loss and the over-budget categories. While
    ALERTING, later recomputations only refresh the loss amount. The alert
    clears when its TTL runs out or when savings are no longer negative.
    """

    def __init__(self, ttl: timedelta = DEFAULT_ALERT_TTL) -> None:
        self.ttl = ttl
        self._alert: LossAlert | None = None

    @property
    def state(self) -> AlertState:
        return AlertState.ALERTING if self._alert is not None else AlertState.CLEAR

    def evaluate(
        self,
        summary: LedgerSummary,
        categories: Sequence[BudgetCategory],
        now: datetime,
    ) -> LossAlert | None:
        """Re-evaluate after a recomputation.

        Args:
            summary: Fresh income/expense totals.
            categories: Fresh budget categories.
            now: Current time.

        Returns:
            The active alert, or None.
        """
        self._expire(now)

        if not summary.is_loss:
            if self._alert is not None:
                logger.info("Loss cleared, savings now %s", summary.savings)
            self._alert = None
            return None

        loss = Money(-summary.savings)
        if self._alert is None:
            self._alert = LossAlert(
                active=True,
                total_loss_amount=loss,
                over_budget_categories=tuple(over_budget_categories(categories)),
                created_at=now,
                ttl=self.ttl,
            )
            logger.info("Loss alert raised: loss of %s", loss)
        else:
            self._alert = replace(self._alert, total_loss_amount=loss)
        return self._alert

    def current(self, now: datetime) -> LossAlert | None:
        """The active alert, or None if clear or expired."""
        self._expire(now)
        return self._alert

    def dismiss(self) -> None:
        """Clear the alert early, as closing the alert dialog does."""
        self._alert = None

    def _expire(self, now: datetime) -> None:
        if self._alert is not None and self._alert.is_expired(now):
            logger.debug("Loss alert expired after %s", self._alert.ttl)
            self._alert = None


def describe_loss_alert(alert: LossAlert) -> str:
    """Compose the human-readable loss message with reasons and suggestions."""
    loss = f"${alert.total_loss_amount:,.2f}"

    if alert.over_budget_categories:
        causes = ", ".join(
            f"{category.name} (Spent: ${category.spent:,.2f}, Limit: ${category.limit:,.2f})"
            for category in alert.over_budget_categories
        )
        return (
            f"You are in a loss of {loss}. Reasons:\n"
            f"- Overspending in: {causes}\n\n"
            "Suggestions:\n"
            "- Reduce spending in these categories.\n"
            "- Increase income sources.\n"
            "- Adjust budget limits realistically."
        )

    return (
        f"You are in a loss of {loss}. Reasons:\n"
        "- Expenses exceed income.\n\n"
        "Suggestions:\n"
        "- Cut unnecessary expenses.\n"
        "- Boost your income.\n"
        "- Review and adjust your budget."
    )


def total_overspend(alert: LossAlert) -> Decimal:
    """Sum of spend above limit across the alert's categories."""
    return sum((category.spent - category.limit for category in alert.over_budget_categories), Decimal(0))
