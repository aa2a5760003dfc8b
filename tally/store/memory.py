"""In-memory transaction store, the single source of truth for the ledger."""

import uuid
from collections.abc import Iterable

from tally.domain.models import TransactionId
from tally.domain.transactions import NormalizedInput, Transaction


def new_transaction_id() -> TransactionId:
    """Generate a fresh unique transaction id."""
    return TransactionId(uuid.uuid4().hex)


class TransactionStore:
    """Owns the ledger's transactions in insertion order.

    The store only holds records. Recomputing derived views after a mutation
    is the engine's job.
    """

    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        self._transactions: dict[TransactionId, Transaction] = {}
        for txn in transactions:
            self._transactions[txn.id] = txn

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._transactions

    def add(self, fields: NormalizedInput) -> Transaction:
        """Store normalized fields under a fresh id and return the record."""
        transaction_id = new_transaction_id()
        while transaction_id in self._transactions:
            transaction_id = new_transaction_id()
        txn = fields.to_transaction(transaction_id)
        self._transactions[transaction_id] = txn
        return txn

    def get(self, transaction_id: str) -> Transaction | None:
        return self._transactions.get(TransactionId(transaction_id))

    def replace(self, transaction_id: str, fields: NormalizedInput) -> Transaction | None:
        """Replace the record for an id, keeping its position.

        Returns:
            The new record, or None if the id is unknown.
        """
        key = TransactionId(transaction_id)
        if key not in self._transactions:
            return None
        txn = fields.to_transaction(key)
        self._transactions[key] = txn
        return txn

    def remove(self, transaction_id: str) -> bool:
        """Remove a record if present.

        Returns:
            True if a record was removed, False if the id was unknown.
        """
        return self._transactions.pop(TransactionId(transaction_id), None) is not None

    def copy(self) -> "TransactionStore":
        """Independent store holding the same records."""
        return TransactionStore(self._transactions.values())

    def all(self) -> tuple[Transaction, ...]:
        """All records in insertion order."""
        return tuple(self._transactions.values())
