"""API tests for pricing rule endpoints."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from orderflow.api.dependencies import get_manage_pricing_rules_use_case
from orderflow.api.main import app
from orderflow.application.use_cases import ManagePricingRulesUseCase
from orderflow.core.entities import PricingRule, RuleTarget, RuleType


@pytest.fixture
def rule_store():
    store = AsyncMock()
    store.create_rule.side_effect = lambda rule: rule
    store.list_rules.return_value = [
        PricingRule(
            id="rule-agent",
            name="Agent commission",
            rule_type=RuleType.COMMISSION,
            value=Decimal("2"),
            target=RuleTarget.AGENT,
        )
    ]
    store.delete_rule.return_value = True
    return store


@pytest.fixture
async def rules_client(rule_store):
    use_case = ManagePricingRulesUseCase(pricing_rule_store=rule_store)
    app.dependency_overrides[get_manage_pricing_rules_use_case] = lambda: use_case
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_manage_pricing_rules_use_case, None)


async def test_create_rule(rules_client: AsyncClient):
    response = await rules_client.post(
        "/api/pricing-rules",
        json={
            "name": "Gaddi trade discount",
            "rule_type": "DISCOUNT",
            "value": "3",
            "target": "INTERMEDIARY",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"].startswith("rule-")
    assert data["target"] == "INTERMEDIARY"
    assert data["calculation_type"] == "PERCENTAGE"


async def test_percentage_over_100_is_400(rules_client, rule_store):
    response = await rules_client.post(
        "/api/pricing-rules",
        json={"name": "Too much", "rule_type": "DISCOUNT", "value": "150"},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "value"
    rule_store.create_rule.assert_not_called()


async def test_list_rules(rules_client: AsyncClient):
    response = await rules_client.get("/api/pricing-rules")

    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == ["rule-agent"]


async def test_delete_rule(rules_client: AsyncClient):
    response = await rules_client.delete("/api/pricing-rules/rule-agent")
    assert response.status_code == 204


async def test_delete_missing_rule_is_404(rules_client, rule_store):
    rule_store.delete_rule.return_value = False

    response = await rules_client.delete("/api/pricing-rules/rule-nope")

    assert response.status_code == 404
    assert response.json()["error_code"] == "PRICING_RULE_NOT_FOUND"
