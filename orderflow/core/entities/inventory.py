"""Catalog variant and stock movement entities."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from orderflow.core.entities.common import utcnow


class ProductVariant(BaseModel):
    """A sellable colour/size variant. Stock is counted in sets."""

    id: str
    product_id: str
    product_name: str = ""
    sku: str = ""
    color: str = ""
    size_range: str = ""
    stock: int = Field(default=0, ge=0)
    price_per_piece: Decimal = Field(..., ge=0)
    pieces_per_set: int = Field(..., gt=0)
    hsn_code: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def stock_pieces(self) -> int:
        """Display-only conversion; all bookkeeping stays in sets."""
        return self.stock * self.pieces_per_set

    @property
    def search_text(self) -> str:
        return f"{self.product_name} {self.sku} {self.color} {self.size_range}".lower()


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class AdjustmentMode(str, Enum):
    """How an admin correction is applied."""

    SET = "SET"
    DELTA = "DELTA"


class StockMovement(BaseModel):
    """Append-only record of a stock change on one variant."""

    id: int | None = None
    variant_id: str
    movement_type: MovementType
    quantity_sets: int  # always positive for IN/OUT; signed change for ADJUSTMENT
    stock_after: int
    reason: str = ""
    reference: str | None = None  # order id for reservations and releases
    performed_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class StockShortfall(BaseModel):
    """Advisory availability gap reported at order creation."""

    variant_id: str
    requested: int
    available: int

    @property
    def shortfall(self) -> int:
        return self.requested - self.available
