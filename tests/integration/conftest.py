"""Fixtures wiring the real SQLite stores to the use cases."""

from types import SimpleNamespace

import pytest

from orderflow.application.services import get_order_state_machine
from orderflow.application.use_cases import (
    ManageLedgerUseCase,
    NegotiateDiscountUseCase,
    PlaceOrderUseCase,
    TransitionOrderUseCase,
)
from orderflow.infrastructure.storage.sqlite import (
    SQLiteAccountStore,
    SQLiteInventoryStore,
    SQLiteLedgerStore,
    SQLiteNotificationStore,
    SQLiteOrderStore,
    SQLitePricingRuleStore,
)


@pytest.fixture
async def env(initialized_db, sample_variant, sample_account):
    """Real stores over a fresh database holding one kurti variant (10 sets) and one account."""
    stores = SimpleNamespace(
        orders=SQLiteOrderStore(),
        inventory=SQLiteInventoryStore(),
        ledger=SQLiteLedgerStore(),
        accounts=SQLiteAccountStore(),
        rules=SQLitePricingRuleStore(),
        notifications=SQLiteNotificationStore(),
    )
    await stores.inventory.create_variant(sample_variant)
    await stores.accounts.upsert_account(sample_account)

    machine = await get_order_state_machine(
        order_store=stores.orders,
        inventory_store=stores.inventory,
        notifier=stores.notifications,
    )
    stores.place = PlaceOrderUseCase(
        order_store=stores.orders,
        inventory_store=stores.inventory,
        account_store=stores.accounts,
        pricing_rule_store=stores.rules,
    )
    stores.negotiate = NegotiateDiscountUseCase(
        order_store=stores.orders,
        account_store=stores.accounts,
        pricing_rule_store=stores.rules,
    )
    stores.transition = TransitionOrderUseCase(
        state_machine=machine, ledger_store=stores.ledger, retries=1
    )
    stores.ledger_uc = ManageLedgerUseCase(
        ledger_store=stores.ledger, account_store=stores.accounts, order_store=stores.orders
    )
    return stores
