"""Order endpoints: placement, negotiation, lifecycle, documents and invoices."""

from fastapi import APIRouter, Depends, Query, Response, status

from orderflow.api.dependencies import (
    get_compose_invoice_use_case,
    get_negotiate_discount_use_case,
    get_ord_store,
    get_place_order_use_case,
    get_transition_order_use_case,
)
from orderflow.application.dto.requests import (
    AcceptOrderRequest,
    AmendDocumentsRequest,
    CancelOrderRequest,
    ComposeInvoiceRequest,
    DeliverOrderRequest,
    DiscountOfferRequest,
    DispatchOrderRequest,
    MarkReadyRequest,
    PlaceOrderRequest,
    SelectPaymentMethodRequest,
)
from orderflow.application.dto.responses import (
    AppliedDiscountResponse,
    ErrorResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderResponse,
)
from orderflow.application.use_cases import (
    ComposeInvoiceUseCase,
    NegotiateDiscountUseCase,
    PlaceOrderUseCase,
    TransitionOrderUseCase,
)
from orderflow.core.entities.invoice import InvoiceMode
from orderflow.core.entities.order import OrderStatus
from orderflow.core.exceptions import OrderNotFoundError
from orderflow.infrastructure.storage.sqlite import SQLiteOrderStore

router = APIRouter(prefix="/api/orders", tags=["orders"])

TRANSITION_RESPONSES: dict = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=PlaceOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def place_order(
    request: PlaceOrderRequest,
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case),
) -> PlaceOrderResponse:
    """Create a PENDING order. Stock warnings are advisory."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    account_id: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: SQLiteOrderStore = Depends(get_ord_store),
) -> OrderListResponse:
    orders = await store.list_orders(
        status=status_filter,
        account_ids=[account_id] if account_id else None,
        limit=limit,
        offset=offset,
    )
    return OrderListResponse(
        orders=[OrderResponse.from_order(o) for o in orders],
        total=len(orders),
    )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_order(
    order_id: str,
    store: SQLiteOrderStore = Depends(get_ord_store),
) -> OrderResponse:
    order = await store.get_order(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return OrderResponse.from_order(order)


# ============================================================================
# Negotiation
# ============================================================================


@router.post(
    "/{order_id}/discount",
    response_model=AppliedDiscountResponse,
    responses={**TRANSITION_RESPONSES, 422: {"model": ErrorResponse}},
)
async def propose_discount(
    order_id: str,
    request: DiscountOfferRequest,
    use_case: NegotiateDiscountUseCase = Depends(get_negotiate_discount_use_case),
) -> AppliedDiscountResponse:
    """Apply a 0-3% discount. Any non-zero discount locks payment to PAY_NOW."""
    result = await use_case.execute(order_id, request)
    return use_case.to_response(result)


@router.put(
    "/{order_id}/payment-method",
    response_model=OrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def select_payment_method(
    order_id: str,
    request: SelectPaymentMethodRequest,
    use_case: NegotiateDiscountUseCase = Depends(get_negotiate_discount_use_case),
) -> OrderResponse:
    order = await use_case.select_payment_method(order_id, request)
    return use_case.order_response(order)


# ============================================================================
# Lifecycle
# ============================================================================


@router.post("/{order_id}/accept", response_model=OrderResponse, responses=TRANSITION_RESPONSES)
async def accept_order(
    order_id: str,
    request: AcceptOrderRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """PENDING -> ACCEPTED. Reserves stock for every line."""
    return use_case.to_response(await use_case.accept(order_id, request))


@router.post("/{order_id}/ready", response_model=OrderResponse, responses=TRANSITION_RESPONSES)
async def mark_ready(
    order_id: str,
    request: MarkReadyRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """ACCEPTED -> READY. Needs the invoice document."""
    return use_case.to_response(await use_case.mark_ready(order_id, request))


@router.post("/{order_id}/dispatch", response_model=OrderResponse, responses=TRANSITION_RESPONSES)
async def dispatch_order(
    order_id: str,
    request: DispatchOrderRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """READY -> DISPATCHED. Needs the GR (builty) number."""
    return use_case.to_response(await use_case.dispatch(order_id, request))


@router.post("/{order_id}/deliver", response_model=OrderResponse, responses=TRANSITION_RESPONSES)
async def deliver_order(
    order_id: str,
    request: DeliverOrderRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """DISPATCHED -> DELIVERED. Credit orders are charged to the account ledger."""
    return use_case.to_response(await use_case.deliver(order_id, request))


@router.post("/{order_id}/cancel", response_model=OrderResponse, responses=TRANSITION_RESPONSES)
async def cancel_order(
    order_id: str,
    request: CancelOrderRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """Cancel before dispatch. Reserved stock goes back."""
    return use_case.to_response(await use_case.cancel(order_id, request))


@router.patch(
    "/{order_id}/documents",
    response_model=OrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def amend_documents(
    order_id: str,
    request: AmendDocumentsRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """Replace document URLs without changing status."""
    return use_case.to_response(await use_case.amend_documents(order_id, request))


# ============================================================================
# Invoices
# ============================================================================


@router.get(
    "/{order_id}/invoice",
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    order_id: str,
    mode: InvoiceMode = InvoiceMode.RETAILER_MEMO,
    use_case: ComposeInvoiceUseCase = Depends(get_compose_invoice_use_case),
) -> Response:
    """Invoice data as canonical JSON; the same order and mode give the same bytes."""
    document = await use_case.execute(ComposeInvoiceRequest(order_id=order_id, mode=mode))
    return Response(content=document.render(), media_type="application/json")
