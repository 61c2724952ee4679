"""Manage Pricing Rules Use Case."""

from orderflow.application.dto.requests import CreatePricingRuleRequest
from orderflow.application.dto.responses import PricingRuleResponse
from orderflow.config import get_logger
from orderflow.core.entities.common import utcnow
from orderflow.core.entities.pricing import CalculationType, PricingRule
from orderflow.core.exceptions import PricingRuleNotFoundError, ValidationError
from orderflow.core.interfaces.pricing_rule_store import IPricingRuleStore

logger = get_logger(__name__)

HUNDRED = 100


class ManagePricingRulesUseCase:
    """Create, list and delete commercial rules. Existing orders keep their snapshot."""

    def __init__(self, pricing_rule_store: IPricingRuleStore | None = None):
        self._pricing_rule_store = pricing_rule_store

    async def _get_pricing_rule_store(self) -> IPricingRuleStore:
        if self._pricing_rule_store is None:
            from orderflow.infrastructure.storage.sqlite import get_pricing_rule_store

            self._pricing_rule_store = await get_pricing_rule_store()
        return self._pricing_rule_store

    async def create_rule(self, request: CreatePricingRuleRequest) -> PricingRule:
        if request.calculation_type == CalculationType.PERCENTAGE and request.value > HUNDRED:
            raise ValidationError("value", "percentage rules cannot exceed 100", request.value)

        effective_from = request.effective_from or utcnow()
        if request.effective_to is not None and request.effective_to < effective_from:
            raise ValidationError(
                "effective_to", "must not be before effective_from", request.effective_to
            )

        rule = PricingRule(
            name=request.name,
            rule_type=request.rule_type,
            calculation_type=request.calculation_type,
            value=request.value,
            min_order_value=request.min_order_value,
            priority=request.priority,
            target=request.target,
            effective_from=effective_from,
            effective_to=request.effective_to,
        )
        rule = await (await self._get_pricing_rule_store()).create_rule(rule)
        logger.info(
            "pricing_rule_created",
            rule_id=rule.id,
            rule_type=rule.rule_type.value,
            target=rule.target.value,
        )
        return rule

    async def list_rules(self) -> list[PricingRule]:
        return await (await self._get_pricing_rule_store()).list_rules()

    async def delete_rule(self, rule_id: str) -> None:
        deleted = await (await self._get_pricing_rule_store()).delete_rule(rule_id)
        if not deleted:
            raise PricingRuleNotFoundError(rule_id)
        logger.info("pricing_rule_deleted", rule_id=rule_id)

    @staticmethod
    def to_response(rule: PricingRule) -> PricingRuleResponse:
        return PricingRuleResponse.from_rule(rule)
