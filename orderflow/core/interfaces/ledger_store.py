"""Abstract interface for ledger transaction storage."""

from abc import ABC, abstractmethod

from orderflow.core.entities.ledger import Transaction, TransactionType


class ILedgerStore(ABC):
    """Append-only transaction history. Balances are never stored."""

    @abstractmethod
    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """Append a ledger entry."""
        pass

    @abstractmethod
    async def list_transactions(
        self, account_id: str | None = None, limit: int | None = None
    ) -> list[Transaction]:
        """List entries, newest first. No limit returns the full history."""
        pass

    @abstractmethod
    async def find_by_reference(
        self, reference_id: str, type: TransactionType | None = None
    ) -> list[Transaction]:
        """Find entries pointing at an external record such as an order."""
        pass
