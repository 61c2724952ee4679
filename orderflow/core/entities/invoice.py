"""Invoice document entities: two renderings of one order."""

import json
from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class InvoiceMode(str, Enum):
    """Which legal document to produce."""

    RETAILER_MEMO = "RETAILER_MEMO"  # informational, non-tax
    INTERMEDIARY_TAX_INVOICE = "INTERMEDIARY_TAX_INVOICE"  # GST instrument


class InvoiceLine(BaseModel):
    line_no: int
    description: str
    hsn_code: str | None = None
    quantity_sets: int
    pieces: int
    rate_per_piece: Decimal
    amount: Decimal  # rate_per_piece * pieces, undiscounted


class InvoiceDocument(BaseModel):
    """Structured invoice data. Printing and PDF layout happen elsewhere."""

    mode: InvoiceMode
    title: str
    label: str
    is_tax_instrument: bool
    order_id: str
    issue_date: date
    seller_name: str
    seller_gstin: str | None = None
    buyer_id: str
    buyer_name: str
    intermediary_id: str | None = None
    lines: list[InvoiceLine] = Field(default_factory=list)
    subtotal: Decimal
    discount_rate: Decimal
    discount_amount: Decimal
    taxable_value: Decimal
    tax_rate: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    tax_amount: Decimal
    grand_total: Decimal
    terms: list[str] = Field(default_factory=list)

    def render(self) -> bytes:
        """Canonical JSON bytes; identical documents give identical bytes."""
        payload = self.model_dump(mode="json")
        return json.dumps(
            payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")
