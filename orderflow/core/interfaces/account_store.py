"""Abstract interface for account storage."""

from abc import ABC, abstractmethod

from orderflow.core.entities.account import Account


class IAccountStore(ABC):
    """Interface for the account projection used for attribution."""

    @abstractmethod
    async def upsert_account(self, account: Account) -> Account:
        """Create or replace an account."""
        pass

    @abstractmethod
    async def get_account(self, account_id: str) -> Account | None:
        """Get account by ID."""
        pass

    @abstractmethod
    async def list_by_agent(self, agent_id: str) -> list[Account]:
        """List accounts assigned to a field agent."""
        pass
