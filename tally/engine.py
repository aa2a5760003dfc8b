"""Ledger engine: the transaction store plus its always-current derived views.

Every successful mutation runs the same pipeline: apply the change to a copy
of the store, rebuild every derived view from that copy, re-evaluate the loss
alert, swap the copy in, then notify change listeners. Views are replaced as
a whole, never patched.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Protocol

from tally.config import Settings
from tally.dates import year_start
from tally.domain.alerts import DEFAULT_ALERT_TTL, LossAlert, LossDetector
from tally.domain.budget import (
    DEFAULT_BUDGETS,
    BudgetCategory,
    find_category,
    recompute_budgets,
    set_limit,
    toggle_notifications,
    unregistered_categories,
)
from tally.domain.models import CategoryName, Month
from tally.domain.query import TransactionFilter, query_transactions
from tally.domain.report import (
    DEFAULT_CHART_PLACEHOLDER,
    CategoryBreakdownEntry,
    LedgerSummary,
    TimeSeriesBucket,
    chart_slices,
    compute_summary,
    project_category_breakdown,
    project_monthly_series,
)
from tally.domain.transactions import NormalizedInput, NotFoundError, Transaction, merge_patch, normalize
from tally.store.memory import TransactionStore

logger = logging.getLogger(__name__)

ChangeListener = Callable[[Sequence[Transaction]], None]


class Persistence(Protocol):
    """Storage collaborator: supplies the starting ledger and hears about changes."""

    def load_initial_transactions(self) -> Iterable[Transaction]: ...

    def on_change(self, transactions: Sequence[Transaction]) -> None: ...


@dataclass(frozen=True)
class LedgerViews:
    """All derived views, computed together from one transaction snapshot."""

    budgets: tuple[BudgetCategory, ...]
    series: tuple[TimeSeriesBucket, ...]
    breakdown: tuple[CategoryBreakdownEntry, ...]
    summary: LedgerSummary


class Ledger:
    """In-memory ledger with budget, series, breakdown and loss-alert views."""

    def __init__(
        self,
        budgets: Iterable[BudgetCategory] = DEFAULT_BUDGETS,
        *,
        persistence: Persistence | None = None,
        window_start: Month | None = None,
        window_months: int = 6,
        alert_ttl: timedelta = DEFAULT_ALERT_TTL,
        chart_placeholder: Decimal = DEFAULT_CHART_PLACEHOLDER,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._budget_config = tuple(budgets)
        self.window_start = window_start or year_start(clock())
        self.window_months = window_months
        self.chart_placeholder = chart_placeholder
        self._loss_detector = LossDetector(alert_ttl)
        self._listeners: list[ChangeListener] = []

        initial = persistence.load_initial_transactions() if persistence is not None else ()
        self._store = TransactionStore(initial)
        if persistence is not None:
            self.subscribe(persistence.on_change)

        self._views = self._recompute(self._store.all(), self._budget_config)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        persistence: Persistence | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "Ledger":
        """Build a ledger from loaded configuration."""
        return cls(
            settings.budgets,
            persistence=persistence,
            window_start=settings.window_start,
            window_months=settings.window_months,
            alert_ttl=settings.loss_alert_ttl,
            chart_placeholder=settings.chart_placeholder,
            clock=clock,
        )

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback that receives the full ledger after each change."""
        self._listeners.append(listener)

    # Mutations

    def validate(self, raw: Mapping[str, Any]) -> NormalizedInput:
        """Normalize raw input without storing it.

        Lets a form tell an explicit 0 from an amount that was defaulted.
        """
        return normalize(raw, self._clock())

    def add_transaction(self, raw: Mapping[str, Any]) -> Transaction:
        """Normalize and store a new transaction."""
        candidate = self._store.copy()
        txn = candidate.add(self.validate(raw))
        self._commit(candidate)
        logger.debug("Added transaction %s", txn.id)
        return txn

    def update_transaction(self, transaction_id: str, patch: Mapping[str, Any]) -> Transaction | NotFoundError:
        """Replace a transaction with the patch merged over its current fields.

        Returns:
            The new record, or NotFoundError if the id is unknown.
        """
        existing = self._store.get(transaction_id)
        if existing is None:
            return NotFoundError(transaction_id)

        candidate = self._store.copy()
        txn = candidate.replace(transaction_id, self.validate(merge_patch(existing, patch)))
        if txn is None:
            return NotFoundError(transaction_id)
        self._commit(candidate)
        logger.debug("Updated transaction %s", transaction_id)
        return txn

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction; unknown ids are ignored."""
        candidate = self._store.copy()
        if not candidate.remove(transaction_id):
            logger.debug("Delete ignored, no transaction %s", transaction_id)
            return
        self._commit(candidate)
        logger.debug("Deleted transaction %s", transaction_id)

    def set_budget_limit(self, name: str, raw_limit: object) -> BudgetCategory | NotFoundError:
        """Change a category's limit from user input (invalid input sets 0)."""
        budgets, updated = set_limit(self._budget_config, name, raw_limit)
        return self._apply_budget_change(budgets, updated, name)

    def toggle_notifications(self, name: str) -> BudgetCategory | NotFoundError:
        """Flip a category's notifications flag."""
        budgets, updated = toggle_notifications(self._budget_config, name)
        return self._apply_budget_change(budgets, updated, name)

    def dismiss_loss_alert(self) -> None:
        self._loss_detector.dismiss()

    # Reads

    def transactions(self) -> tuple[Transaction, ...]:
        """All transactions in insertion order."""
        return self._store.all()

    def get_transaction(self, transaction_id: str) -> Transaction | NotFoundError:
        txn = self._store.get(transaction_id)
        return txn if txn is not None else NotFoundError(transaction_id)

    def query_transactions(self, flt: TransactionFilter | None = None) -> list[Transaction]:
        return query_transactions(self._store.all(), flt)

    def get_budget_overview(self) -> list[BudgetCategory]:
        return list(self._views.budgets)

    def get_monthly_series(self, window_months: int | None = None) -> list[TimeSeriesBucket]:
        """Monthly income/expense buckets for the fixed window.

        Args:
            window_months: Number of months from the window start; defaults to
                the configured window length.
        """
        if window_months is None or window_months == self.window_months:
            return list(self._views.series)
        return project_monthly_series(self._store.all(), self.window_start, window_months)

    def get_category_breakdown(self) -> list[CategoryBreakdownEntry]:
        return list(self._views.breakdown)

    def get_chart_slices(self) -> list[CategoryBreakdownEntry]:
        """Category breakdown with zero slices replaced for pie charts."""
        return chart_slices(self._views.breakdown, self.chart_placeholder)

    def get_summary(self) -> LedgerSummary:
        return self._views.summary

    def get_loss_alert(self) -> LossAlert | None:
        return self._loss_detector.current(self._clock())

    def get_unregistered_categories(self) -> set[CategoryName]:
        """Categories used by transactions but missing from the budget configuration."""
        return unregistered_categories(self._store.all(), self._budget_config)

    @property
    def budget_config(self) -> tuple[BudgetCategory, ...]:
        """Configured categories (without derived spend), for saving."""
        return self._budget_config

    # Pipeline

    def _recompute(
        self,
        transactions: tuple[Transaction, ...],
        budget_config: tuple[BudgetCategory, ...],
    ) -> LedgerViews:
        budgets = recompute_budgets(transactions, budget_config)
        views = LedgerViews(
            budgets=tuple(budgets),
            series=tuple(project_monthly_series(transactions, self.window_start, self.window_months)),
            breakdown=tuple(project_category_breakdown(budgets)),
            summary=compute_summary(transactions),
        )
        self._loss_detector.evaluate(views.summary, budgets, self._clock())
        logger.debug("Recomputed views over %d transactions", len(transactions))
        return views

    def _commit(self, candidate: TransactionStore) -> None:
        # The store is only swapped in once its views are built
        snapshot = candidate.all()
        self._views = self._recompute(snapshot, self._budget_config)
        self._store = candidate
        for listener in self._listeners:
            listener(snapshot)

    def _apply_budget_change(
        self,
        budgets: list[BudgetCategory],
        updated: BudgetCategory | None,
        name: str,
    ) -> BudgetCategory | NotFoundError:
        if updated is None:
            return NotFoundError(name, kind="budget category")
        config = tuple(budgets)
        self._views = self._recompute(self._store.all(), config)
        self._budget_config = config
        current = find_category(self._views.budgets, name)
        return current if current is not None else NotFoundError(name, kind="budget category")
