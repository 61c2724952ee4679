"""Tests for quick-order parsing, pricing rule and invoice use cases."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from orderflow.application.dto.requests import (
    ComposeInvoiceRequest,
    CreatePricingRuleRequest,
    QuickOrderParseRequest,
)
from orderflow.application.use_cases.compose_invoice import ComposeInvoiceUseCase
from orderflow.application.use_cases.manage_pricing_rules import ManagePricingRulesUseCase
from orderflow.application.use_cases.parse_quick_order import ParseQuickOrderUseCase
from orderflow.core.entities import InvoiceMode, RuleType
from orderflow.core.exceptions import (
    OrderNotFoundError,
    PricingRuleNotFoundError,
    ValidationError,
)


class TestParseQuickOrderUseCase:
    @pytest.fixture
    def inventory_store(self, sample_variant):
        store = AsyncMock()
        store.list_variants.return_value = [sample_variant]
        return store

    async def test_text_matched_against_full_catalog(self, inventory_store):
        use_case = ParseQuickOrderUseCase(inventory_store=inventory_store)

        result = await use_case.execute(QuickOrderParseRequest(text="sku,qty\nAK-RED-SXXL,4"))

        inventory_store.list_variants.assert_awaited_once_with(limit=None)
        assert use_case.to_response(result).quantities == {"var-kurti-red": 4}

    async def test_assistant_lines(self, inventory_store):
        use_case = ParseQuickOrderUseCase(inventory_store=inventory_store)
        result = await use_case.execute(
            QuickOrderParseRequest(lines=[{"keyword": "anarkali", "quantity_sets": 2}, {"keyword": "x"}])
        )
        response = use_case.to_response(result)
        assert response.quantities == {"var-kurti-red": 2}
        assert response.unmatched[0].reason == "invalid_quantity"

    @pytest.mark.parametrize(
        "request_kwargs",
        [{}, {"text": "  "}, {"text": "a,1", "lines": []}],
    )
    async def test_exactly_one_source(self, inventory_store, request_kwargs):
        use_case = ParseQuickOrderUseCase(inventory_store=inventory_store)
        with pytest.raises(ValidationError):
            await use_case.execute(QuickOrderParseRequest(**request_kwargs))


class TestManagePricingRulesUseCase:
    @pytest.fixture
    def rule_store(self):
        store = AsyncMock()
        store.create_rule.side_effect = lambda rule: rule
        return store

    async def test_create(self, rule_store):
        use_case = ManagePricingRulesUseCase(pricing_rule_store=rule_store)
        rule = await use_case.create_rule(
            CreatePricingRuleRequest(name="Diwali", rule_type=RuleType.DISCOUNT, value=Decimal("5"))
        )
        assert rule.effective_from is not None
        assert use_case.to_response(rule).name == "Diwali"

    async def test_percentage_over_hundred(self, rule_store):
        use_case = ManagePricingRulesUseCase(pricing_rule_store=rule_store)
        with pytest.raises(ValidationError):
            await use_case.create_rule(
                CreatePricingRuleRequest(name="Bad", rule_type=RuleType.DISCOUNT, value=Decimal("101"))
            )
        rule_store.create_rule.assert_not_called()

    async def test_window_must_be_ordered(self, rule_store):
        use_case = ManagePricingRulesUseCase(pricing_rule_store=rule_store)
        with pytest.raises(ValidationError):
            await use_case.create_rule(
                CreatePricingRuleRequest(
                    name="Backwards",
                    rule_type=RuleType.MARKUP,
                    value=Decimal("1"),
                    effective_from=datetime(2024, 6, 1, tzinfo=UTC),
                    effective_to=datetime(2024, 5, 1, tzinfo=UTC),
                )
            )

    async def test_delete_missing(self, rule_store):
        rule_store.delete_rule.return_value = False
        use_case = ManagePricingRulesUseCase(pricing_rule_store=rule_store)
        with pytest.raises(PricingRuleNotFoundError):
            await use_case.delete_rule("rule-nope")


class TestComposeInvoiceUseCase:
    async def test_composes_stored_order(self, make_order):
        order_store = AsyncMock()
        order_store.get_order.return_value = make_order()
        use_case = ComposeInvoiceUseCase(order_store=order_store)

        document = await use_case.execute(
            ComposeInvoiceRequest(order_id="ord-test0001", mode=InvoiceMode.INTERMEDIARY_TAX_INVOICE)
        )

        assert document.grand_total == Decimal("3055.50")
        assert document.seller_gstin == "07AJIPH1947G1Z9"

    async def test_missing_order(self):
        order_store = AsyncMock()
        order_store.get_order.return_value = None
        use_case = ComposeInvoiceUseCase(order_store=order_store)
        with pytest.raises(OrderNotFoundError):
            await use_case.execute(ComposeInvoiceRequest(order_id="ord-nope"))
