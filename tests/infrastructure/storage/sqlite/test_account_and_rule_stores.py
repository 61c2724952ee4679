"""Tests for SQLiteAccountStore and SQLitePricingRuleStore."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from orderflow.core.entities import CalculationType, PricingRule, RuleTarget, RuleType
from orderflow.infrastructure.storage.sqlite.account_store import SQLiteAccountStore
from orderflow.infrastructure.storage.sqlite.pricing_rule_store import SQLitePricingRuleStore


@pytest.fixture
async def accounts(initialized_db):
    return SQLiteAccountStore()


@pytest.fixture
async def rules(initialized_db):
    return SQLitePricingRuleStore()


class TestAccounts:
    async def test_upsert_replaces(self, accounts, store_account):
        await accounts.upsert_account(store_account)
        await accounts.upsert_account(
            store_account.model_copy(update={"assigned_agent_id": "agent-9"})
        )

        loaded = await accounts.get_account("acc-retail-1")
        assert loaded.assigned_agent_id == "agent-9"
        assert loaded.gstin == "08ABCDE1234F1Z5"

    async def test_list_by_agent(self, accounts, store_account):
        await accounts.upsert_account(store_account)
        await accounts.upsert_account(
            store_account.model_copy(update={"id": "acc-2", "assigned_agent_id": "agent-9"})
        )

        assigned = await accounts.list_by_agent("agent-7")
        assert [a.id for a in assigned] == ["acc-retail-1"]
        assert await accounts.get_account("acc-none") is None


class TestPricingRules:
    async def test_round_trip_and_delete(self, rules):
        rule = PricingRule(
            name="Festive markup",
            rule_type=RuleType.MARKUP,
            calculation_type=CalculationType.FIXED_AMOUNT,
            value=Decimal("150.25"),
            min_order_value=Decimal("5000.00"),
            priority=2,
            target=RuleTarget.INTERMEDIARY,
            effective_from=datetime(2024, 1, 1, tzinfo=UTC),
            effective_to=datetime(2024, 12, 31, tzinfo=UTC),
        )
        await rules.create_rule(rule)

        [loaded] = await rules.list_rules()
        assert loaded.value == Decimal("150.25")
        assert loaded.min_order_value == Decimal("5000.00")
        assert loaded.target is RuleTarget.INTERMEDIARY
        assert loaded.effective_to == datetime(2024, 12, 31, tzinfo=UTC)

        assert await rules.delete_rule(rule.id) is True
        assert await rules.delete_rule(rule.id) is False
        assert await rules.list_rules() == []
