"""SQLite-backed persistence collaborator for the ledger engine."""

import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from tally.domain.transactions import Transaction
from tally.store.queries import get_all_transactions, replace_all_transactions
from tally.store.schema import get_db_path

logger = logging.getLogger(__name__)


class SqlitePersistence:
    """Loads the initial ledger and mirrors every change to SQLite.

    Writes are fire-and-forget: a failed write is logged and the in-memory
    ledger carries on.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()
        self.last_error: sqlite3.Error | None = None

    def load_initial_transactions(self) -> list[Transaction]:
        """Read the stored transactions.

        Raises:
            sqlite3.Error: If the database cannot be read.
        """
        transactions = get_all_transactions(self.db_path)
        logger.debug("Loaded %d transactions from %s", len(transactions), self.db_path)
        return transactions

    def on_change(self, transactions: Sequence[Transaction]) -> None:
        """Persist a full snapshot of the ledger."""
        try:
            written = replace_all_transactions(transactions, self.db_path)
        except sqlite3.Error as e:
            self.last_error = e
            logger.warning("Could not save transactions to %s: %s", self.db_path, e)
            return
        self.last_error = None
        logger.debug("Saved %d transactions to %s", written, self.db_path)
