"""Negotiate Discount Use Case: apply an offer or change payment method on a PENDING order."""

from dataclasses import dataclass

from orderflow.application.dto.requests import DiscountOfferRequest, SelectPaymentMethodRequest
from orderflow.application.dto.responses import AppliedDiscountResponse, OrderResponse
from orderflow.application.services import get_discount_negotiation, get_pricing_engine
from orderflow.application.use_cases.place_order import apply_totals
from orderflow.config import get_logger
from orderflow.core.entities.discount import AppliedDiscount, DiscountOffer
from orderflow.core.entities.order import Order, OrderStatus
from orderflow.core.exceptions import OrderNotFoundError
from orderflow.core.interfaces.account_store import IAccountStore
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.core.interfaces.pricing_rule_store import IPricingRuleStore
from orderflow.core.services.discount_negotiation import DiscountNegotiation
from orderflow.core.services.pricing import PricingEngine

logger = get_logger(__name__)


@dataclass
class NegotiateDiscountResult:
    order: Order
    applied: AppliedDiscount


class NegotiateDiscountUseCase:
    """
    Apply a discount offer to a stored order.

    Totals are recomputed with the rules active now, and the write only
    lands if the order is still PENDING.
    """

    def __init__(
        self,
        order_store: IOrderStore | None = None,
        account_store: IAccountStore | None = None,
        pricing_rule_store: IPricingRuleStore | None = None,
        pricing_engine: PricingEngine | None = None,
        negotiation: DiscountNegotiation | None = None,
    ):
        self._order_store = order_store
        self._account_store = account_store
        self._pricing_rule_store = pricing_rule_store
        self._pricing_engine = pricing_engine or get_pricing_engine()
        self._negotiation = negotiation or get_discount_negotiation()

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from orderflow.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

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

    async def _load(self, order_id: str) -> Order:
        order = await (await self._get_order_store()).get_order(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def execute(self, order_id: str, request: DiscountOfferRequest) -> NegotiateDiscountResult:
        order = await self._load(order_id)
        expected = order.status

        applied = self._negotiation.propose_discount(
            order, DiscountOffer(percent=request.percent, message=request.message)
        )
        if applied.changed:
            account = await (await self._get_account_store()).get_account(order.account_id)
            rules = await (await self._get_pricing_rule_store()).list_rules()
            apply_totals(order, self._pricing_engine, rules, account)
            order = await (await self._get_order_store()).update_if_status(
                order, expected_status=expected
            )

        logger.info(
            "negotiate_discount_complete",
            order_id=order.id,
            percent=applied.percent,
            changed=applied.changed,
            total_amount=str(order.total_amount),
        )
        return NegotiateDiscountResult(order=order, applied=applied)

    async def select_payment_method(
        self, order_id: str, request: SelectPaymentMethodRequest
    ) -> Order:
        """Change the settlement method of a PENDING order."""
        order = await self._load(order_id)
        self._negotiation.select_payment_method(order, request.payment_method)
        order = await (await self._get_order_store()).update_if_status(
            order, expected_status=OrderStatus.PENDING
        )
        logger.info(
            "payment_method_selected",
            order_id=order.id,
            payment_method=order.payment_method.value,
        )
        return order

    def to_response(self, result: NegotiateDiscountResult) -> AppliedDiscountResponse:
        applied = result.applied
        return AppliedDiscountResponse(
            order_id=applied.order_id,
            percent=applied.percent,
            previous_percent=applied.previous_percent,
            payment_method=applied.payment_method.value,
            disclosure=applied.disclosure,
            disclosed_at=applied.disclosed_at,
            changed=applied.changed,
            total_amount=result.order.total_amount,
        )

    @staticmethod
    def order_response(order: Order) -> OrderResponse:
        return OrderResponse.from_order(order)
