"""Place Order Use Case: snapshot catalog prices, price, optionally discount, persist."""

from dataclasses import dataclass, field

from orderflow.application.dto.requests import PlaceOrderRequest
from orderflow.application.dto.responses import (
    OrderResponse,
    PlaceOrderResponse,
    StockShortfallResponse,
)
from orderflow.application.services import get_discount_negotiation, get_pricing_engine
from orderflow.config import get_logger
from orderflow.core.entities.account import Account
from orderflow.core.entities.discount import AppliedDiscount, DiscountOffer
from orderflow.core.entities.inventory import StockShortfall
from orderflow.core.entities.order import Order, OrderItem
from orderflow.core.entities.pricing import PricingRule, RuleContext
from orderflow.core.exceptions import VariantNotFoundError
from orderflow.core.interfaces.account_store import IAccountStore
from orderflow.core.interfaces.inventory_store import IInventoryStore
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.core.interfaces.pricing_rule_store import IPricingRuleStore
from orderflow.core.services.discount_negotiation import DiscountNegotiation
from orderflow.core.services.inventory_ledger import InventoryLedger
from orderflow.core.services.pricing import PricingEngine

logger = get_logger(__name__)


def apply_totals(
    order: Order,
    engine: PricingEngine,
    rules: list[PricingRule],
    account: Account | None = None,
) -> Order:
    """Recompute total, factory amount and rule snapshot from the order's lines."""
    context = RuleContext(
        intermediary_id=order.intermediary_id,
        agent_id=account.assigned_agent_id if account else None,
    )
    totals = engine.price_order(
        order.items,
        discount_percent=order.discount_percent,
        intermediary_id=order.intermediary_id,
        rules=rules,
        context=context,
    )
    order.total_amount = totals.total_amount
    order.factory_amount = totals.factory_amount
    order.pricing = totals.snapshot
    return order


@dataclass
class PlaceOrderResult:
    order: Order
    stock_warnings: list[StockShortfall] = field(default_factory=list)
    applied_discount: AppliedDiscount | None = None


class PlaceOrderUseCase:
    """
    Create a PENDING order.

    Catalog prices are copied onto the lines here and never re-read. The
    stock check is advisory: nothing is reserved until acceptance.
    """

    def __init__(
        self,
        order_store: IOrderStore | None = None,
        inventory_store: IInventoryStore | None = None,
        account_store: IAccountStore | None = None,
        pricing_rule_store: IPricingRuleStore | None = None,
        pricing_engine: PricingEngine | None = None,
        negotiation: DiscountNegotiation | None = None,
    ):
        self._order_store = order_store
        self._inventory_store = inventory_store
        self._account_store = account_store
        self._pricing_rule_store = pricing_rule_store
        self._pricing_engine = pricing_engine or get_pricing_engine()
        self._negotiation = negotiation or get_discount_negotiation()

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from orderflow.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from orderflow.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_account_store(self) -> IAccountStore:
        if self._account_store is None:
            from orderflow.infrastructure.storage.sqlite import get_account_store

            self._account_store = await get_account_store()
        return self._account_store

    async def _get_pricing_rule_store(self) -> IPricingRuleStore:
        if self._pricing_rule_store is None:
            from orderflow.infrastructure.storage.sqlite import get_pricing_rule_store

            self._pricing_rule_store = await get_pricing_rule_store()
        return self._pricing_rule_store

    async def execute(self, request: PlaceOrderRequest) -> PlaceOrderResult:
        logger.info(
            "place_order_started",
            account_id=request.account_id,
            lines=len(request.lines),
        )

        inventory_store = await self._get_inventory_store()
        account = await (await self._get_account_store()).get_account(request.account_id)

        # 1. Snapshot catalog values onto the lines
        items = []
        for line in request.lines:
            variant = await inventory_store.get_variant(line.variant_id)
            if variant is None:
                raise VariantNotFoundError(line.variant_id)
            items.append(
                OrderItem(
                    product_id=variant.product_id,
                    variant_id=variant.id,
                    product_name=variant.product_name,
                    color=variant.color,
                    size_range=variant.size_range,
                    price_per_piece=variant.price_per_piece,
                    pieces_per_set=variant.pieces_per_set,
                    quantity_sets=line.quantity_sets,
                    hsn_code=variant.hsn_code,
                )
            )

        order = Order(
            account_id=request.account_id,
            account_name=request.account_name or (account.business_name if account else ""),
            items=items,
            payment_method=request.payment_method,
            intermediary_id=request.intermediary_id
            or (account.intermediary_id if account else None),
        )

        # 2. Negotiated discount goes through the same checks as later offers
        applied = None
        if request.discount is not None:
            applied = self._negotiation.propose_discount(
                order,
                DiscountOffer(percent=request.discount.percent, message=request.discount.message),
            )

        # 3. Price with active commercial rules
        rules = await (await self._get_pricing_rule_store()).list_rules()
        apply_totals(order, self._pricing_engine, rules, account)

        # 4. Advisory availability check
        warnings = await InventoryLedger(inventory_store).check_availability(items)
        if warnings:
            logger.warning(
                "order_stock_warning",
                order_id=order.id,
                variants=[w.variant_id for w in warnings],
            )

        order = await (await self._get_order_store()).create_order(order)

        logger.info(
            "place_order_complete",
            order_id=order.id,
            total_amount=str(order.total_amount),
            discount_percent=order.discount_percent,
        )
        return PlaceOrderResult(order=order, stock_warnings=warnings, applied_discount=applied)

    def to_response(self, result: PlaceOrderResult) -> PlaceOrderResponse:
        return PlaceOrderResponse(
            order=OrderResponse.from_order(result.order),
            stock_warnings=[
                StockShortfallResponse(
                    variant_id=w.variant_id,
                    requested=w.requested,
                    available=w.available,
                    shortfall=w.shortfall,
                )
                for w in result.stock_warnings
            ],
        )
