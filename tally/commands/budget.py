"""Budget command for viewing spend against limits and editing budgets."""

import sqlite3
import sys
import tomllib

from rich.table import Table

from tally.commands.common import console, open_ledger
from tally.config import save_budget_categories
from tally.domain.budget import BudgetCategory, calculate_budget_percentage
from tally.domain.transactions import NotFoundError
from tally.engine import Ledger


def format_budget_display_with_color(percentage: float) -> str:
    """Format budget display with color based on percentage.

    Args:
        percentage: Budget usage percentage.

    Returns:
        Colored string for budget display.
    """
    budget_text = f"{percentage:.0f}%"
    if percentage > 100:
        return f"[red]{budget_text}[/red]"
    elif percentage > 90:
        return f"[yellow]{budget_text}[/yellow]"
    else:
        return f"[green]{budget_text}[/green]"


def render_budget_table(budgets: list[BudgetCategory]) -> Table:
    """Build the budget overview table."""
    table = Table(title="Budget overview")
    table.add_column("Category", style="cyan")
    table.add_column("Spent", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Available", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Alerts", justify="center")

    for budget in budgets:
        available = budget.available
        available_display = f"${available:,.2f}" if available >= 0 else f"[red]-${abs(available):,.2f}[/red]"
        table.add_row(
            budget.name,
            f"${budget.spent:,.2f}",
            f"${budget.limit:,.2f}",
            available_display,
            format_budget_display_with_color(calculate_budget_percentage(budget.spent, budget.limit)),
            "🔔" if budget.notifications_enabled else "[dim]off[/dim]",
        )
    return table


def save_budget_change(ledger: Ledger, result: BudgetCategory | NotFoundError) -> BudgetCategory:
    """Save a changed budget configuration, exiting if the category is unknown."""
    if isinstance(result, NotFoundError):
        console.print(f"[red]{result.message}[/red]")
        sys.exit(1)

    save_budget_categories(list(ledger.budget_config))
    return result


def budget_command(
    set_limit: tuple[str, str] | None = None,
    toggle_notifications: str | None = None,
) -> None:
    """Show budget status, optionally changing a limit or notification flag first.

    Args:
        set_limit: (category, amount) to set; invalid amounts set the limit to 0.
        toggle_notifications: Category whose notifications flag to flip.
    """
    try:
        ledger, _ = open_ledger()

        if set_limit is not None:
            name, raw_limit = set_limit
            budget = save_budget_change(ledger, ledger.set_budget_limit(name, raw_limit))
            console.print(f"[green]✓[/green] {budget.name} limit set to ${budget.limit:,.2f}")

        if toggle_notifications is not None:
            budget = save_budget_change(ledger, ledger.toggle_notifications(toggle_notifications))
            state = "on" if budget.notifications_enabled else "off"
            console.print(f"[green]✓[/green] {budget.name} notifications {state}")

        budgets = ledger.get_budget_overview()
        if not budgets:
            console.print("[dim]No budget categories configured[/dim]")
            return

        console.print(render_budget_table(budgets))

        unregistered = sorted(ledger.get_unregistered_categories())
        if unregistered:
            console.print(f"\n[yellow]Not budgeted:[/yellow] {', '.join(unregistered)}")

    except (sqlite3.Error, tomllib.TOMLDecodeError) as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
