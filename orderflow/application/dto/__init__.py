"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from orderflow.application.dto.requests import (
    AcceptOrderRequest,
    AdjustStockRequest,
    AmendDocumentsRequest,
    CancelOrderRequest,
    ComposeInvoiceRequest,
    CreatePricingRuleRequest,
    CreateVariantRequest,
    DeliverOrderRequest,
    DiscountOfferRequest,
    DispatchOrderRequest,
    MarkReadyRequest,
    OrderLineRequest,
    PlaceOrderRequest,
    QuickOrderParseRequest,
    RecordTransactionRequest,
    SelectPaymentMethodRequest,
    UpsertAccountRequest,
)
from orderflow.application.dto.responses import (
    AccountResponse,
    AppliedDiscountResponse,
    CommissionRecordResponse,
    CommissionSummaryResponse,
    DuesResponse,
    ErrorResponse,
    HealthResponse,
    NotificationResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderResponse,
    PricingRuleResponse,
    QuickOrderParseResponse,
    StockMovementResponse,
    TransactionResponse,
    VariantListResponse,
    VariantResponse,
)

__all__ = [
    # Requests
    "OrderLineRequest",
    "DiscountOfferRequest",
    "PlaceOrderRequest",
    "SelectPaymentMethodRequest",
    "AcceptOrderRequest",
    "MarkReadyRequest",
    "DispatchOrderRequest",
    "DeliverOrderRequest",
    "CancelOrderRequest",
    "AmendDocumentsRequest",
    "ComposeInvoiceRequest",
    "CreateVariantRequest",
    "AdjustStockRequest",
    "RecordTransactionRequest",
    "UpsertAccountRequest",
    "CreatePricingRuleRequest",
    "QuickOrderParseRequest",
    # Responses
    "OrderResponse",
    "PlaceOrderResponse",
    "OrderListResponse",
    "AppliedDiscountResponse",
    "VariantResponse",
    "VariantListResponse",
    "StockMovementResponse",
    "TransactionResponse",
    "DuesResponse",
    "CommissionRecordResponse",
    "CommissionSummaryResponse",
    "AccountResponse",
    "PricingRuleResponse",
    "NotificationResponse",
    "QuickOrderParseResponse",
    "HealthResponse",
    "ErrorResponse",
]
