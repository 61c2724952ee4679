"""SQLite storage implementations."""

from orderflow.infrastructure.storage.sqlite.account_store import SQLiteAccountStore
from orderflow.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from orderflow.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from orderflow.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from orderflow.infrastructure.storage.sqlite.notification_store import SQLiteNotificationStore
from orderflow.infrastructure.storage.sqlite.order_store import SQLiteOrderStore
from orderflow.infrastructure.storage.sqlite.pricing_rule_store import SQLitePricingRuleStore

# Singleton instances
_order_store: SQLiteOrderStore | None = None
_inventory_store: SQLiteInventoryStore | None = None
_ledger_store: SQLiteLedgerStore | None = None
_account_store: SQLiteAccountStore | None = None
_pricing_rule_store: SQLitePricingRuleStore | None = None
_notification_store: SQLiteNotificationStore | None = None


async def get_order_store() -> SQLiteOrderStore:
    """Get singleton order store instance."""
    global _order_store
    if _order_store is None:
        _order_store = SQLiteOrderStore()
    return _order_store


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


async def get_account_store() -> SQLiteAccountStore:
    """Get singleton account store instance."""
    global _account_store
    if _account_store is None:
        _account_store = SQLiteAccountStore()
    return _account_store


async def get_pricing_rule_store() -> SQLitePricingRuleStore:
    """Get singleton pricing rule store instance."""
    global _pricing_rule_store
    if _pricing_rule_store is None:
        _pricing_rule_store = SQLitePricingRuleStore()
    return _pricing_rule_store


async def get_notification_store() -> SQLiteNotificationStore:
    """Get singleton notification store instance."""
    global _notification_store
    if _notification_store is None:
        _notification_store = SQLiteNotificationStore()
    return _notification_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteOrderStore",
    "SQLiteInventoryStore",
    "SQLiteLedgerStore",
    "SQLiteAccountStore",
    "SQLitePricingRuleStore",
    "SQLiteNotificationStore",
    # Factory functions
    "get_order_store",
    "get_inventory_store",
    "get_ledger_store",
    "get_account_store",
    "get_pricing_rule_store",
    "get_notification_store",
]
