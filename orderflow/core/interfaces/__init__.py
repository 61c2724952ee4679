"""Core interfaces (ports) for dependency injection."""

from orderflow.core.interfaces.account_store import IAccountStore
from orderflow.core.interfaces.inventory_store import IInventoryStore
from orderflow.core.interfaces.ledger_store import ILedgerStore
from orderflow.core.interfaces.notifier import INotificationStore, INotifier
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.core.interfaces.pricing_rule_store import IPricingRuleStore

__all__ = [
    # Storage interfaces
    "IOrderStore",
    "IInventoryStore",
    "ILedgerStore",
    "IAccountStore",
    "IPricingRuleStore",
    # Notification interfaces
    "INotifier",
    "INotificationStore",
]
