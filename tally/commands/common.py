"""Helpers shared by the CLI commands."""

import sys

from rich.console import Console

from tally.config import get_config_path, load_settings
from tally.domain.transactions import Transaction
from tally.engine import Ledger
from tally.store.persistence import SqlitePersistence
from tally.store.schema import database_exists, get_db_path

console = Console()

SHORT_ID_LENGTH = 8


def open_ledger() -> tuple[Ledger, SqlitePersistence]:
    """Load configuration and stored transactions into a ledger.

    Exits with status 1 if tally has not been initialized or the config file
    is invalid.

    Returns:
        Tuple of (ledger, persistence); the ledger saves through persistence
        after every change.

    Raises:
        sqlite3.Error: If the database cannot be read.
    """
    config_path = get_config_path()
    db_path = get_db_path()

    if not config_path.exists() or not database_exists(db_path):
        console.print("[red]tally is not initialized. Run 'tally init' first.[/red]", style="bold")
        sys.exit(1)

    try:
        settings = load_settings(config_path)
    except ValueError as e:
        console.print(f"[red]Invalid config file {config_path}: {e}[/red]", style="bold")
        sys.exit(1)

    persistence = SqlitePersistence(db_path)
    return Ledger.from_settings(settings, persistence=persistence), persistence


def report_save_error(persistence: SqlitePersistence) -> None:
    """Tell the user if the last change could not be written."""
    if persistence.last_error is not None:
        console.print(f"[red]Change not saved: {persistence.last_error}[/red]", style="bold")
        sys.exit(1)


def short_id(txn: Transaction) -> str:
    return txn.id[:SHORT_ID_LENGTH]


def resolve_transaction_id(ledger: Ledger, id_or_prefix: str) -> str | None:
    """Expand a short id to the full id of exactly one transaction."""
    matches = [txn.id for txn in ledger.transactions() if txn.id.startswith(id_or_prefix)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        console.print(f"[yellow]'{id_or_prefix}' matches {len(matches)} transactions, use a longer id[/yellow]")
    return None
