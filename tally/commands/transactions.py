"""Transaction management commands (add, edit, delete, list)."""

import sqlite3
import sys
from typing import Any

from rich.table import Table

from tally.commands.common import console, open_ledger, report_save_error, resolve_transaction_id, short_id
from tally.dates import parse_date
from tally.domain.query import TransactionFilter
from tally.domain.transactions import (
    InvalidTransactionType,
    NotFoundError,
    Transaction,
    format_money_display,
)


def print_transaction(txn: Transaction) -> None:
    """Print the fields of one transaction."""
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.date:%Y-%m-%d}")
    console.print(f"  Category: {txn.category}")
    console.print(f"  Amount: {format_money_display(txn.amount, txn.type)}")
    if txn.notes:
        console.print(f"  Notes: {txn.notes}")
    if txn.receipt_ref:
        console.print(f"  Receipt: {txn.receipt_ref}")


def add_command(
    amount: str,
    transaction_type: str,
    category: str | None = None,
    date: str | None = None,
    notes: str | None = None,
    receipt: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        amount: Amount as entered (invalid input is stored as 0).
        transaction_type: 'income' or 'expense'.
        category: Optional category name (defaults to 'Others').
        date: Optional date (YYYY-MM-DD, DD/MM/YYYY, ...); defaults to now.
        notes: Optional notes.
        receipt: Optional reference to a receipt image.
    """
    raw: dict[str, Any] = {
        "amount": amount,
        "type": transaction_type,
        "category": category,
        "date": date,
        "notes": notes,
        "receipt_ref": receipt,
    }

    try:
        ledger, persistence = open_ledger()

        fields = ledger.validate(raw)
        txn = ledger.add_transaction(raw)
        report_save_error(persistence)

        console.print("[green]✓[/green] Transaction added:")
        print_transaction(txn)

        if fields.amount_defaulted:
            console.print(f"[yellow]Amount '{amount}' is not a valid amount, stored as 0[/yellow]")
        if fields.date_defaulted and date:
            console.print(f"[yellow]Date '{date}' not recognized, used today[/yellow]")
        if txn.category in ledger.get_unregistered_categories():
            console.print(f"[dim]No budget configured for '{txn.category}', it won't appear in 'tally budget'[/dim]")

    except InvalidTransactionType as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)


def edit_command(transaction_id: str, changes: dict[str, Any]) -> None:
    """Edit fields of an existing transaction.

    Args:
        transaction_id: Full or short transaction ID.
        changes: Raw field values to change; None values are left out.
    """
    patch = {key: value for key, value in changes.items() if value is not None}

    try:
        ledger, persistence = open_ledger()

        full_id = resolve_transaction_id(ledger, transaction_id) or transaction_id
        result = ledger.update_transaction(full_id, patch)

        if isinstance(result, NotFoundError):
            console.print(f"[red]{result.message}[/red]")
            sys.exit(1)

        report_save_error(persistence)
        console.print(f"[green]✓[/green] Updated transaction {short_id(result)}:")
        print_transaction(result)

    except InvalidTransactionType as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(transaction_id: str) -> None:
    """Delete a transaction. Unknown IDs are not an error."""
    try:
        ledger, persistence = open_ledger()

        full_id = resolve_transaction_id(ledger, transaction_id)
        if full_id is None:
            console.print(f"[dim]No transaction {transaction_id}, nothing deleted[/dim]")
            return

        ledger.delete_transaction(full_id)
        report_save_error(persistence)
        console.print(f"[green]✓[/green] Deleted transaction {full_id[:8]}")

    except sqlite3.Error as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)


def list_command(
    category: str = "",
    notes: str = "",
    since: str | None = None,
    until: str | None = None,
    limit: int | None = 50,
) -> None:
    """List transactions newest first, filtered by category, notes and date range."""
    start = parse_date(since)
    end = parse_date(until)
    if (since and start is None) or (until and end is None):
        console.print("[red]Invalid date filter[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    try:
        ledger, _ = open_ledger()

        # Bare dates include the whole end day
        flt = TransactionFilter(
            category=category,
            notes=notes,
            start=start.date() if start else None,
            end=end.date() if end else None,
        )
        transactions = ledger.query_transactions(flt)

        if not transactions:
            console.print("[yellow]No transactions found[/yellow]")
            return

        shown = transactions if limit is None else transactions[:limit]
        table = Table(title=f"Transactions (showing {len(shown)} of {len(transactions)})")
        table.add_column("ID", style="dim")
        table.add_column("Date", style="cyan")
        table.add_column("Category", style="magenta")
        table.add_column("Amount", justify="right")
        table.add_column("Notes", style="white")
        table.add_column("Receipt", justify="center")

        for txn in shown:
            colour = "green" if txn.is_income else "red"
            table.add_row(
                short_id(txn),
                f"{txn.date:%Y-%m-%d}",
                txn.category,
                f"[{colour}]{format_money_display(txn.amount, txn.type)}[/{colour}]",
                txn.notes,
                "📎" if txn.receipt_ref else "",
            )

        console.print(table)

    except sqlite3.Error as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)
