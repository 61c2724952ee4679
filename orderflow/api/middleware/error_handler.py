"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
- detail: the structured context carried by the domain exception
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from orderflow.application.dto.responses import ErrorResponse
from orderflow.config import get_logger
from orderflow.core.exceptions import (
    CommercialError,
    ConcurrencyConflictError,
    ConfigurationError,
    DiscountRejectedError,
    IllegalTransitionError,
    InsufficientStockError,
    NotFoundError,
    OrderflowError,
    PaymentMethodLockedError,
    PreconditionNotMetError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes. Order matters: subclasses first.
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DiscountRejectedError: 422,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    PaymentMethodLockedError: status.HTTP_409_CONFLICT,
    IllegalTransitionError: status.HTTP_409_CONFLICT,
    PreconditionNotMetError: status.HTTP_409_CONFLICT,
    ConcurrencyConflictError: status.HTTP_409_CONFLICT,
    CommercialError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "ORDER_NOT_FOUND": "Check the order ID and try GET /api/orders to list orders.",
    "VARIANT_NOT_FOUND": "Check the variant ID and try GET /api/inventory/variants.",
    "ACCOUNT_NOT_FOUND": "Register the account with PUT /api/ledger/accounts/{id} first.",
    "PRICING_RULE_NOT_FOUND": "Check the rule ID and try GET /api/pricing-rules.",
    "INSUFFICIENT_STOCK": "Reduce the quantity to the available sets or restock the variant.",
    "DISCOUNT_REJECTED": "Offer a whole-number discount between 0 and 3 percent.",
    "PAYMENT_METHOD_LOCKED": "Discounted orders settle with PAY_NOW. Remove the discount to use credit.",
    "ILLEGAL_TRANSITION": "Fetch the order to see its current status and the moves it allows.",
    "PRECONDITION_NOT_MET": "Supply the missing document, field or confirmation and retry.",
    "CONCURRENCY_CONFLICT": "The order changed while you were editing it. Reload and retry.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state of the resource.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to the standardized JSON error body."""
    status_code = _status_for(exc)

    # Prefer OrderflowError.code, fall back to class name
    if isinstance(exc, OrderflowError):
        error_code = exc.code
        detail = exc.details or None
    else:
        error_code = exc.__class__.__name__
        detail = None

    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        status=status_code,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    # Internal failures do not leak their message
    message = str(exc) if status_code < 500 else "Internal server error"

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            detail=detail if status_code < 500 else None,
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the registered handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(OrderflowError)
    async def domain_exception_handler(
        request: Request,
        exc: OrderflowError,
    ) -> JSONResponse:
        """Handle rejections raised by the engine."""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code, exc.detail or "")
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int, detail: str) -> str:
    """Infer a machine-readable error code from HTTPException detail."""
    detail_lower = detail.lower()

    if status_code == 404:
        if "order" in detail_lower:
            return "ORDER_NOT_FOUND"
        if "variant" in detail_lower:
            return "VARIANT_NOT_FOUND"
        if "notification" in detail_lower:
            return "NOTIFICATION_NOT_FOUND"
        return "NOT_FOUND"

    if status_code == 400:
        return "BAD_REQUEST"

    if status_code == 409:
        return "CONFLICT"

    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"

    return "HTTP_ERROR"
