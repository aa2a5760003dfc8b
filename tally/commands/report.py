"""Report command: totals, monthly series, category breakdown and loss alert."""

import sqlite3
import sys
from decimal import Decimal

from rich.panel import Panel

from tally.commands.common import console, open_ledger
from tally.domain.alerts import describe_loss_alert, total_overspend
from tally.domain.report import (
    CategoryBreakdownEntry,
    TimeSeriesBucket,
    calculate_histogram_bar_length,
    calculate_savings,
)


def render_series(buckets: list[TimeSeriesBucket], bar_width: int = 30) -> None:
    """Render monthly income and expense histogram lines."""
    max_amount = max((max(b.income_sum, b.expense_sum) for b in buckets), default=Decimal(0))

    for bucket in buckets:
        income_bar = "█" * calculate_histogram_bar_length(bucket.income_sum, max_amount, bar_width)
        expense_bar = "█" * calculate_histogram_bar_length(bucket.expense_sum, max_amount, bar_width)
        console.print(f"  {bucket.label} {bucket.month[:4]}  [green]+${bucket.income_sum:>10,.2f}[/green] {income_bar}")
        console.print(f"            [red]-${bucket.expense_sum:>10,.2f}[/red] {expense_bar}")


def render_breakdown(entries: list[CategoryBreakdownEntry], bar_width: int = 30) -> None:
    """Render category spend with share of total."""
    total = sum((entry.amount for entry in entries), Decimal(0))
    max_amount = max((entry.amount for entry in entries), default=Decimal(0))

    for entry in entries:
        share = f"{entry.amount / total * 100:5.1f}%" if total > 0 else "  0.0%"
        bar = "█" * calculate_histogram_bar_length(entry.amount, max_amount, bar_width)
        console.print(f"  {entry.name:20} ${entry.amount:>10,.2f} {share} {bar}")


def report_command(months: int | None = None) -> None:
    """Show totals, the monthly series, the category breakdown and any loss alert.

    Args:
        months: Window length in months; defaults to the configured window.
    """
    try:
        ledger, _ = open_ledger()

        summary = ledger.get_summary()
        console.print("[bold cyan]Summary[/bold cyan]\n")
        console.print(f"  [bold]Income:[/bold]   ${summary.income:,.2f}")
        console.print(f"  [bold]Expenses:[/bold] ${summary.expenses:,.2f}")
        savings_colour = "red" if summary.is_loss else "green"
        console.print(f"  [bold]Savings:[/bold]  [{savings_colour}]${summary.savings:,.2f}[/{savings_colour}]\n")

        buckets = ledger.get_monthly_series(months)
        console.print(f"[bold cyan]Monthly income and expenses from {ledger.window_start}[/bold cyan]\n")
        render_series(buckets)

        console.print("\n[bold red]Spending by category:[/bold red]\n")
        render_breakdown(ledger.get_category_breakdown())

        alert = ledger.get_loss_alert()
        if alert is not None:
            message = describe_loss_alert(alert)
            if alert.over_budget_categories:
                message += f"\n\nOverspend across categories: ${total_overspend(alert):,.2f}"
            console.print()
            console.print(Panel(message, title="Financial Loss Alert", border_style="red"))

    except sqlite3.Error as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)


def savings_command(income: str, expenses: str) -> None:
    """Work out savings from entered totals; no ledger is needed."""
    savings = calculate_savings(income, expenses)
    colour = "red" if savings < 0 else "green"
    sign = "-" if savings < 0 else ""
    console.print(f"[bold]Savings:[/bold] [{colour}]{sign}${abs(savings):,.2f}[/{colour}]")
