"""CLI entry point for tally."""

import logging

import typer
from rich.logging import RichHandler

from tally.commands.admin import init_command
from tally.commands.budget import budget_command
from tally.commands.common import console
from tally.commands.report import report_command, savings_command
from tally.commands.transactions import add_command, delete_command, edit_command, list_command

app = typer.Typer(
    name="tally",
    help="tally - an expense ledger with budgets, monthly reports and loss alerts",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """tally - an expense ledger with budgets, monthly reports and loss alerts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize tally database and configuration."""
    init_command(force)


@app.command()
def add(
    amount: str,
    transaction_type: str = typer.Option("expense", "--type", "-t", help="'income' or 'expense'"),
    category: str = typer.Option(None, "--category", "-c", help="Category (default: Others)"),
    date: str = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD or DD/MM/YYYY, default: now)"),
    notes: str = typer.Option(None, "--notes", "-n", help="Notes"),
    receipt: str = typer.Option(None, "--receipt", help="Reference to a receipt image"),
) -> None:
    """Add a transaction."""
    add_command(amount, transaction_type, category, date, notes, receipt)


@app.command()
def edit(
    transaction_id: str,
    amount: str = typer.Option(None, "--amount", help="New amount"),
    transaction_type: str = typer.Option(None, "--type", "-t", help="'income' or 'expense'"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
    notes: str = typer.Option(None, "--notes", "-n", help="New notes"),
    receipt: str = typer.Option(None, "--receipt", help="New receipt reference"),
) -> None:
    """Edit a transaction (by ID or ID prefix)."""
    edit_command(
        transaction_id,
        {
            "amount": amount,
            "type": transaction_type,
            "category": category,
            "date": date,
            "notes": notes,
            "receipt_ref": receipt,
        },
    )


@app.command()
def delete(transaction_id: str) -> None:
    """Delete a transaction (by ID or ID prefix)."""
    delete_command(transaction_id)


@app.command(name="list")
def list_transactions(
    category: str = typer.Option("", "--category", "-c", help="Category contains (case-insensitive)"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes contain (case-insensitive)"),
    since: str = typer.Option(None, "--since", help="From date, inclusive"),
    until: str = typer.Option(None, "--until", help="To date, inclusive"),
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all matching transactions"),
) -> None:
    """List your transactions, newest first."""
    list_command(category, notes, since, until, None if all else limit)


@app.command()
def budget(
    set_limit: tuple[str, str] = typer.Option((None, None), "--set-limit", help="CATEGORY AMOUNT"),
    toggle_notifications: str = typer.Option(None, "--toggle-notifications", help="Category to toggle"),
) -> None:
    """Show your budget status and spending."""
    budget_command(set_limit if set_limit[0] is not None else None, toggle_notifications)


@app.command()
def report(
    months: int = typer.Option(None, "--months", "-m", help="Months in the chart window (default: from config)"),
) -> None:
    """Show your income, spending and savings."""
    report_command(months)


@app.command()
def savings(
    income: str = typer.Argument(..., help="Total income"),
    expenses: str = typer.Argument(..., help="Total expenses"),
) -> None:
    """Calculate savings from income and expenses."""
    savings_command(income, expenses)


if __name__ == "__main__":
    app()
