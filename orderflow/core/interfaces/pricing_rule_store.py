"""Abstract interface for commercial rule storage."""

from abc import ABC, abstractmethod

from orderflow.core.entities.pricing import PricingRule


class IPricingRuleStore(ABC):

    @abstractmethod
    async def create_rule(self, rule: PricingRule) -> PricingRule:
        pass

    @abstractmethod
    async def list_rules(self) -> list[PricingRule]:
        """All rules, including expired ones."""
        pass

    @abstractmethod
    async def delete_rule(self, rule_id: str) -> bool:
        """Delete a rule. Returns False when it did not exist."""
        pass
