"""
Domain exceptions for the order engine.

Every rejection carries enough detail (missing requirement, shortfall,
current vs attempted status) for a caller to present an actionable message.
"""

from typing import Any


class OrderflowError(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(OrderflowError):
    """Base exception for storage operations."""

    pass


class NotFoundError(StorageError):
    """Base for missing records."""

    pass


class OrderNotFoundError(NotFoundError):
    """Order not found in storage."""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
            details={"order_id": order_id},
        )


class VariantNotFoundError(NotFoundError):
    """Product variant not found in storage."""

    def __init__(self, variant_id: str):
        super().__init__(
            f"Product variant not found: {variant_id}",
            code="VARIANT_NOT_FOUND",
            details={"variant_id": variant_id},
        )


class AccountNotFoundError(NotFoundError):
    """Account not found in storage."""

    def __init__(self, account_id: str):
        super().__init__(
            f"Account not found: {account_id}",
            code="ACCOUNT_NOT_FOUND",
            details={"account_id": account_id},
        )


class PricingRuleNotFoundError(NotFoundError):
    """Pricing rule not found in storage."""

    def __init__(self, rule_id: str):
        super().__init__(
            f"Pricing rule not found: {rule_id}",
            code="PRICING_RULE_NOT_FOUND",
            details={"rule_id": rule_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class MigrationError(StorageError):
    """A schema migration could not be applied."""

    def __init__(self, version: str, reason: str):
        super().__init__(
            f"Migration v{version} failed: {reason}",
            code="MIGRATION_FAILED",
            details={"version": version, "reason": reason},
        )


# Validation Exceptions
class ValidationError(OrderflowError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Commercial Exceptions
class CommercialError(OrderflowError):
    """Base exception for recoverable commercial rejections."""

    pass


class InsufficientStockError(CommercialError):
    """Variant stock (in sets) cannot cover the requested quantity."""

    def __init__(self, variant_id: str, requested: int, available: int):
        shortfall = requested - available
        super().__init__(
            f"Insufficient stock for variant {variant_id}: "
            f"requested {requested} sets, available {available} (short by {shortfall})",
            code="INSUFFICIENT_STOCK",
            details={
                "variant_id": variant_id,
                "requested": requested,
                "available": available,
                "shortfall": shortfall,
            },
        )


class DiscountRejectedError(CommercialError):
    """A proposed discount was refused."""

    def __init__(self, percent: Any, reason: str, max_percent: int = 3):
        super().__init__(
            f"Discount of {percent}% rejected: {reason}",
            code="DISCOUNT_REJECTED",
            details={"percent": percent, "reason": reason, "max_percent": max_percent},
        )


class PaymentMethodLockedError(CommercialError):
    """A deferred payment method was requested on a discounted order."""

    def __init__(self, order_id: str | None, requested: str, discount_percent: int):
        super().__init__(
            f"Order carries a {discount_percent}% discount; only PAY_NOW is allowed "
            f"(requested {requested})",
            code="PAYMENT_METHOD_LOCKED",
            details={
                "order_id": order_id,
                "requested": requested,
                "discount_percent": discount_percent,
            },
        )


# Lifecycle Exceptions
class LifecycleError(OrderflowError):
    """Base exception for order state machine rejections."""

    pass


class IllegalTransitionError(LifecycleError):
    """The attempted move is not in the transition graph."""

    def __init__(self, order_id: str, current: str, attempted: str):
        super().__init__(
            f"Order {order_id} cannot move from {current} to {attempted}",
            code="ILLEGAL_TRANSITION",
            details={"order_id": order_id, "current": current, "attempted": attempted},
        )


class PreconditionNotMetError(LifecycleError):
    """A required document, field or confirmation is missing."""

    def __init__(self, order_id: str | None, requirement: str, message: str):
        super().__init__(
            message,
            code="PRECONDITION_NOT_MET",
            details={"order_id": order_id, "requirement": requirement},
        )


class ConcurrencyConflictError(LifecycleError):
    """A conditional update lost against a concurrent writer."""

    def __init__(
        self,
        order_id: str,
        expected_status: str,
        actual_status: str | None = None,
        expected_version: int | None = None,
        actual_version: int | None = None,
    ):
        if actual_status == expected_status and expected_version is not None:
            found = f"version {actual_version}, expected {expected_version}"
        else:
            found = f"expected {expected_status}, found {actual_status or 'unknown'}"
        super().__init__(
            f"Order {order_id} changed concurrently ({found})",
            code="CONCURRENCY_CONFLICT",
            details={
                "order_id": order_id,
                "expected_status": expected_status,
                "actual_status": actual_status,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


class ConfigurationError(OrderflowError):
    """Configuration error."""

    pass
