"""Database query functions."""

import sqlite3
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from tally.domain.models import CategoryName, Money, TransactionId, TransactionType
from tally.domain.transactions import Transaction
from tally.store.schema import get_db_path


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=TransactionId(row["id"]),
        amount=Money(Decimal(row["amount"])),
        category=CategoryName(row["category"]),
        date=datetime.fromisoformat(row["date"]),
        notes=row["notes"],
        receipt_ref=row["receipt_ref"],
        type=TransactionType(row["type"]),
    )


def get_all_transactions(db_path: Path | None = None) -> list[Transaction]:
    """Get all transactions in their stored insertion order.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of Transaction records.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT id, date, amount, category, notes, receipt_ref, type FROM transactions ORDER BY position"
        )
        return [_row_to_transaction(row) for row in cursor.fetchall()]


def replace_all_transactions(transactions: Iterable[Transaction], db_path: Path | None = None) -> int:
    """Overwrite the stored transactions with a full snapshot.

    Args:
        transactions: Transactions in insertion order.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Number of transactions written.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    rows = [
        (txn.id, position, txn.date.isoformat(), str(txn.amount), txn.category, txn.notes, txn.receipt_ref, txn.type.value)
        for position, txn in enumerate(transactions)
    ]
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM transactions")
            cursor.executemany(
                "INSERT INTO transactions (id, position, date, amount, category, notes, receipt_ref, type) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
            conn.commit()
            return len(rows)
        except sqlite3.Error:
            conn.rollback()
            raise
