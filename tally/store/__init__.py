"""Store layer - the in-memory ledger store and its SQLite persistence.

This module re-exports the public store API for easy importing.
"""

from tally.store.memory import TransactionStore, new_transaction_id
from tally.store.persistence import SqlitePersistence
from tally.store.queries import get_all_transactions, replace_all_transactions
from tally.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # In-memory
    "TransactionStore",
    "new_transaction_id",
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "get_all_transactions",
    "replace_all_transactions",
    # Collaborators
    "SqlitePersistence",
]
