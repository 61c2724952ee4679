"""
Invoice Composer.

Produces the two renderings of one order: an informational memo for the
retailer and a GST tax invoice for the intermediary. Both are pure
functions of the order's snapshotted lines, so recomposing an order gives
the same document byte for byte.
"""

from decimal import Decimal

from orderflow.core.entities.common import ZERO, to_money
from orderflow.core.entities.invoice import InvoiceDocument, InvoiceLine, InvoiceMode
from orderflow.core.entities.order import Order
from orderflow.core.exceptions import ValidationError

DEFAULT_HSN_CODE = "620429"

MEMO_TITLE = "ESTIMATE / MEMO"
MEMO_LABEL = "Not a tax invoice. For information only."
TAX_INVOICE_TITLE = "TAX INVOICE"
TAX_INVOICE_LABEL = "Valid tax instrument for input tax credit."


class InvoiceComposer:
    """
    Composes InvoiceDocument objects from orders.

    The tax invoice applies a fixed trade reduction regardless of the
    negotiated order discount.
    """

    def __init__(
        self,
        gst_rate: Decimal = Decimal("0.05"),
        intermediary_discount_rate: Decimal = Decimal("0.03"),
        settlement_days: int = 60,
        seller_name: str = "SALONI SALES",
        seller_gstin: str | None = None,
        jurisdiction: str = "Delhi",
    ):
        self._gst_rate = gst_rate
        self._intermediary_discount_rate = intermediary_discount_rate
        self._settlement_days = settlement_days
        self._seller_name = seller_name
        self._seller_gstin = seller_gstin
        self._jurisdiction = jurisdiction

    def compose(self, order: Order, mode: InvoiceMode) -> InvoiceDocument:
        if not order.items:
            raise ValidationError("items", "cannot invoice an order without lines")

        lines = [
            InvoiceLine(
                line_no=index,
                description=f"{item.product_name} ({item.variant_description})",
                hsn_code=item.hsn_code or DEFAULT_HSN_CODE,
                quantity_sets=item.quantity_sets,
                pieces=item.pieces,
                rate_per_piece=to_money(item.price_per_piece),
                amount=item.gross_amount,
            )
            for index, item in enumerate(order.items, start=1)
        ]
        subtotal = sum((line.amount for line in lines), ZERO)

        is_tax = mode is InvoiceMode.INTERMEDIARY_TAX_INVOICE
        discount_rate = self._intermediary_discount_rate if is_tax else ZERO
        discount_amount = to_money(subtotal * discount_rate)
        taxable_value = subtotal - discount_amount

        # SGST is the remainder so the two halves sum to the flat rate
        tax_amount = to_money(taxable_value * self._gst_rate)
        cgst = to_money(tax_amount / 2)
        sgst = tax_amount - cgst

        return InvoiceDocument(
            mode=mode,
            title=TAX_INVOICE_TITLE if is_tax else MEMO_TITLE,
            label=TAX_INVOICE_LABEL if is_tax else MEMO_LABEL,
            is_tax_instrument=is_tax,
            order_id=order.id,
            issue_date=order.created_at.date(),
            seller_name=self._seller_name,
            seller_gstin=self._seller_gstin if is_tax else None,
            buyer_id=order.account_id,
            buyer_name=order.account_name,
            intermediary_id=order.intermediary_id,
            lines=lines,
            subtotal=subtotal,
            discount_rate=discount_rate,
            discount_amount=discount_amount,
            taxable_value=taxable_value,
            tax_rate=self._gst_rate,
            cgst_amount=cgst,
            sgst_amount=sgst,
            tax_amount=tax_amount,
            grand_total=taxable_value + tax_amount,
            terms=self._terms(is_tax),
        )

    def _terms(self, is_tax: bool) -> list[str]:
        if not is_tax:
            return [MEMO_LABEL, "Goods once sold will not be taken back."]
        return [
            "Goods once sold will not be taken back.",
            "Interest @ 18% p.a. will be charged if the payment is not made within the stipulated time.",
            f"Subject to '{self._jurisdiction}' Jurisdiction only.",
            f"Partner guarantees payment within {self._settlement_days} days.",
        ]
