"""Storage infrastructure implementations."""

from orderflow.infrastructure.storage.sqlite import (
    SQLiteAccountStore,
    SQLiteInventoryStore,
    SQLiteLedgerStore,
    SQLiteNotificationStore,
    SQLiteOrderStore,
    SQLitePricingRuleStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteOrderStore",
    "SQLiteInventoryStore",
    "SQLiteLedgerStore",
    "SQLiteAccountStore",
    "SQLitePricingRuleStore",
    "SQLiteNotificationStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
