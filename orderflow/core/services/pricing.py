"""
Pricing engine.

Single source of truth for line and order arithmetic. Cart display, order
creation and invoice re-derivation all go through the same functions so the
three call sites cannot drift apart.

Layer-pure: no I/O, no clock reads unless a timestamp is passed in.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal, InvalidOperation

from orderflow.core.entities.common import ZERO, to_money, utcnow
from orderflow.core.entities.discount import MAX_DISCOUNT_PERCENT
from orderflow.core.entities.order import OrderItem
from orderflow.core.entities.pricing import (
    AppliedRule,
    CalculationType,
    LinePrice,
    OrderTotals,
    PricingRule,
    PricingSnapshot,
    RuleContext,
    RuleTarget,
    RuleType,
)
from orderflow.core.exceptions import ValidationError

HUNDRED = Decimal(100)


def _as_decimal(field: str, value: Decimal | int | str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number", value)
    try:
        result = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(field, "must be a number", value) from None
    if not result.is_finite():
        raise ValidationError(field, "must be finite", value)
    return result


def _as_int(field: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer", value)
    return value


def validate_discount_percent(percent: int) -> int:
    """Reject anything outside the negotiated band [0, MAX_DISCOUNT_PERCENT]."""
    percent = _as_int("discount_percent", percent)
    if not 0 <= percent <= MAX_DISCOUNT_PERCENT:
        raise ValidationError(
            "discount_percent",
            f"must be between 0 and {MAX_DISCOUNT_PERCENT}",
            percent,
        )
    return percent


class PricingEngine:
    """
    Computes per-piece, per-set and per-order totals.

    All amounts are rounded half-up to the smallest currency unit. Stock and
    quantities are in sets; pieces only enter through ``pieces_per_set``.
    """

    PRICING_VERSION = "v1.0"
    DEFAULT_INTERMEDIARY_SHARE = Decimal("0.03")

    def __init__(self, intermediary_share_rate: Decimal | None = None):
        self._intermediary_share = (
            intermediary_share_rate
            if intermediary_share_rate is not None
            else self.DEFAULT_INTERMEDIARY_SHARE
        )

    def price(
        self,
        price_per_piece: Decimal | int | str,
        pieces_per_set: int,
        quantity_sets: int,
        discount_percent: int = 0,
    ) -> LinePrice:
        """
        Price one line.

        Args:
            price_per_piece: Catalog rate for a single garment
            pieces_per_set: Garments in one set (> 0)
            quantity_sets: Sets ordered (>= 0)
            discount_percent: Negotiated discount, 0..3

        Returns:
            LinePrice with per-set price, discounted unit (set) price and line total

        Raises:
            ValidationError: on any out-of-range argument
        """
        rate = _as_decimal("price_per_piece", price_per_piece)
        if rate < 0:
            raise ValidationError("price_per_piece", "must not be negative", price_per_piece)
        pieces_per_set = _as_int("pieces_per_set", pieces_per_set)
        if pieces_per_set <= 0:
            raise ValidationError("pieces_per_set", "must be positive", pieces_per_set)
        quantity_sets = _as_int("quantity_sets", quantity_sets)
        if quantity_sets < 0:
            raise ValidationError("quantity_sets", "must not be negative", quantity_sets)
        discount_percent = validate_discount_percent(discount_percent)

        set_value = rate * pieces_per_set
        unit_price = to_money(set_value * (HUNDRED - discount_percent) / HUNDRED)
        return LinePrice(
            unit_price=unit_price,
            per_set_price=to_money(set_value),
            line_total=to_money(unit_price * quantity_sets),
        )

    def price_item(self, item: OrderItem, discount_percent: int = 0) -> LinePrice:
        return self.price(
            item.price_per_piece, item.pieces_per_set, item.quantity_sets, discount_percent
        )

    def price_order(
        self,
        items: Sequence[OrderItem],
        discount_percent: int = 0,
        intermediary_id: str | None = None,
        rules: Iterable[PricingRule] = (),
        context: RuleContext | None = None,
        at: datetime | None = None,
    ) -> OrderTotals:
        """
        Price a whole order from its snapshotted lines.

        The negotiated discount is applied per set, the commercial rule
        pipeline runs over the discounted total, and the manufacturer-side
        value is derived last.
        """
        if not items:
            raise ValidationError("items", "an order needs at least one line")

        subtotal = sum((self.price_item(item).line_total for item in items), ZERO)
        discounted = sum(
            (self.price_item(item, discount_percent).line_total for item in items), ZERO
        )
        if context is None:
            context = RuleContext(intermediary_id=intermediary_id)
        snapshot = self.compute_snapshot(discounted, rules, context, at)
        total = snapshot.final_total

        return OrderTotals(
            subtotal=subtotal,
            total_amount=total,
            factory_amount=self.factory_amount(total, intermediary_id),
            snapshot=snapshot,
        )

    def factory_amount(self, total_amount: Decimal, intermediary_id: str | None) -> Decimal:
        """What the manufacturer receives once an intermediary takes its share."""
        if not intermediary_id:
            return total_amount
        return to_money(total_amount * (Decimal(1) - self._intermediary_share))

    def compute_snapshot(
        self,
        base_total: Decimal,
        rules: Iterable[PricingRule],
        context: RuleContext,
        at: datetime | None = None,
    ) -> PricingSnapshot:
        """
        Apply active commercial rules, highest priority first.

        DISCOUNT lowers the total, MARKUP and SHIPPING raise it, COMMISSION is
        recorded as a cost of sale without touching the total. Percentages are
        taken of ``base_total``. The final total never goes below zero.
        """
        at = at or utcnow()
        active = [r for r in rules if r.is_effective(at) and self._targets(r, context)]
        active.sort(key=lambda r: (-r.priority, r.name, r.id))

        current = base_total
        applied: list[AppliedRule] = []
        for rule in active:
            if rule.min_order_value > 0 and base_total < rule.min_order_value:
                continue

            if rule.calculation_type == CalculationType.PERCENTAGE:
                amount = to_money(base_total * rule.value / HUNDRED)
            else:
                amount = to_money(rule.value)

            if rule.rule_type == RuleType.DISCOUNT:
                current -= amount
                amount = -amount
            elif rule.rule_type in (RuleType.MARKUP, RuleType.SHIPPING):
                current += amount

            applied.append(
                AppliedRule(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    rule_type=rule.rule_type,
                    amount=amount,
                )
            )

        return PricingSnapshot(
            base_total=base_total,
            final_total=max(current, ZERO),
            applied_rules=applied,
            pricing_version=self.PRICING_VERSION,
        )

    @staticmethod
    def _targets(rule: PricingRule, context: RuleContext) -> bool:
        if rule.target == RuleTarget.ALL:
            return True
        if rule.target == RuleTarget.INTERMEDIARY:
            return context.intermediary_id is not None
        return context.agent_id is not None
