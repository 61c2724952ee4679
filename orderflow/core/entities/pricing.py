"""Pricing domain entities: line prices, order totals and commercial rules."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from orderflow.core.entities.common import ZERO, new_id, utcnow


class LinePrice(BaseModel):
    """Result of pricing one line: all amounts already rounded."""

    unit_price: Decimal  # discounted per-set price
    per_set_price: Decimal  # price_per_piece * pieces_per_set
    line_total: Decimal  # unit_price * quantity_sets


class RuleType(str, Enum):
    """What a commercial rule does to the order total."""

    DISCOUNT = "DISCOUNT"
    COMMISSION = "COMMISSION"
    MARKUP = "MARKUP"
    SHIPPING = "SHIPPING"


class CalculationType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class RuleTarget(str, Enum):
    """Which orders a rule applies to."""

    ALL = "ALL"
    INTERMEDIARY = "INTERMEDIARY"  # orders routed through a gaddi
    AGENT = "AGENT"  # accounts with an assigned field agent


class PricingRule(BaseModel):
    """A commercial rule evaluated when an order snapshot is computed."""

    id: str = Field(default_factory=lambda: new_id("rule"))
    name: str
    rule_type: RuleType
    calculation_type: CalculationType = CalculationType.PERCENTAGE
    value: Decimal = Field(..., ge=0)
    min_order_value: Decimal = Field(default=ZERO, ge=0)
    priority: int = 0
    target: RuleTarget = RuleTarget.ALL
    effective_from: datetime = Field(default_factory=utcnow)
    effective_to: datetime | None = None

    def is_effective(self, at: datetime) -> bool:
        if self.effective_from > at:
            return False
        return self.effective_to is None or self.effective_to >= at


class RuleContext(BaseModel):
    """Facts about the ordering account that rule targeting looks at."""

    intermediary_id: str | None = None
    agent_id: str | None = None


class AppliedRule(BaseModel):
    """One rule's contribution; discounts are recorded as negative amounts."""

    rule_id: str
    rule_name: str
    rule_type: RuleType
    amount: Decimal


class PricingSnapshot(BaseModel):
    """Immutable record of how an order's final total was reached."""

    base_total: Decimal = ZERO
    final_total: Decimal = ZERO
    applied_rules: list[AppliedRule] = Field(default_factory=list)
    pricing_version: str = "v1.0"

    @property
    def commission_liability(self) -> Decimal:
        return sum(
            (r.amount for r in self.applied_rules if r.rule_type == RuleType.COMMISSION),
            ZERO,
        )


class OrderTotals(BaseModel):
    """Customer-facing and manufacturer-side values of an order."""

    subtotal: Decimal = ZERO  # before negotiated discount
    total_amount: Decimal = ZERO
    factory_amount: Decimal = ZERO
    snapshot: PricingSnapshot = Field(default_factory=PricingSnapshot)
