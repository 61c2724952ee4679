"""Money and clock helpers shared by the entities."""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import uuid4

ZERO = Decimal("0.00")
PAISE = Decimal("0.01")
RUPEE = Decimal("1")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize to the smallest currency unit using round-half-up."""
    if isinstance(value, float):
        # repr keeps 0.1 as 0.1 instead of its binary expansion
        value = repr(value)
    return Decimal(value).quantize(PAISE, rounding=ROUND_HALF_UP)


def to_whole(value: Decimal) -> Decimal:
    """Round half-up to whole currency units."""
    return value.quantize(RUPEE, rounding=ROUND_HALF_UP)


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id(prefix: str) -> str:
    """Opaque record id such as ``ord-3f9a1c2b7d4e``."""
    return f"{prefix}-{uuid4().hex[:12]}"
