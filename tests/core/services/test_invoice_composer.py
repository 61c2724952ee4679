"""Tests for InvoiceComposer."""

from decimal import Decimal

import pytest

from orderflow.core.entities import InvoiceMode, OrderItem
from orderflow.core.exceptions import ValidationError
from orderflow.core.services.invoice_composer import DEFAULT_HSN_CODE, InvoiceComposer


@pytest.fixture
def composer():
    return InvoiceComposer(seller_gstin="07AJIPH1947G1Z9")


class TestRetailerMemo:
    def test_totals(self, composer, make_order):
        doc = composer.compose(make_order(), InvoiceMode.RETAILER_MEMO)

        assert doc.subtotal == Decimal("3000.00")
        assert doc.discount_amount == Decimal("0.00")
        assert doc.taxable_value == Decimal("3000.00")
        assert doc.cgst_amount == Decimal("75.00")
        assert doc.sgst_amount == Decimal("75.00")
        assert doc.grand_total == Decimal("3150.00")

    def test_marked_as_not_a_tax_instrument(self, composer, make_order):
        doc = composer.compose(make_order(), InvoiceMode.RETAILER_MEMO)
        assert doc.is_tax_instrument is False
        assert doc.title == "ESTIMATE / MEMO"
        assert "Not a tax invoice" in doc.label
        assert doc.seller_gstin is None


class TestIntermediaryTaxInvoice:
    def test_trade_reduction_and_split_gst(self, composer, make_order):
        doc = composer.compose(make_order(), InvoiceMode.INTERMEDIARY_TAX_INVOICE)

        assert doc.discount_amount == Decimal("90.00")
        assert doc.taxable_value == Decimal("2910.00")
        assert doc.cgst_amount == Decimal("72.75")
        assert doc.sgst_amount == Decimal("72.75")
        assert doc.tax_amount == Decimal("145.50")
        assert doc.grand_total == Decimal("3055.50")

    def test_odd_paisa_tax_is_split_not_rounded_twice(self, composer, make_order):
        item = OrderItem(
            product_id="prod-scarf",
            variant_id="var-scarf",
            product_name="Scarf",
            price_per_piece=Decimal("100.00"),
            pieces_per_set=1,
            quantity_sets=1,
        )
        doc = composer.compose(make_order(items=[item]), InvoiceMode.INTERMEDIARY_TAX_INVOICE)

        assert doc.taxable_value == Decimal("97.00")
        assert doc.tax_amount == Decimal("4.85")
        assert doc.cgst_amount == Decimal("2.43")
        assert doc.sgst_amount == Decimal("2.42")
        assert doc.grand_total == Decimal("101.85")

    def test_tax_instrument_fields(self, composer, make_order):
        doc = composer.compose(make_order(), InvoiceMode.INTERMEDIARY_TAX_INVOICE)
        assert doc.is_tax_instrument is True
        assert doc.title == "TAX INVOICE"
        assert doc.seller_gstin == "07AJIPH1947G1Z9"
        assert any("60 days" in term for term in doc.terms)

    def test_negotiated_discount_does_not_change_trade_reduction(self, composer, make_order):
        plain = composer.compose(make_order(), InvoiceMode.INTERMEDIARY_TAX_INVOICE)
        discounted = composer.compose(
            make_order(discount_percent=3, total_amount=Decimal("2910.00")),
            InvoiceMode.INTERMEDIARY_TAX_INVOICE,
        )
        assert discounted.discount_amount == plain.discount_amount


class TestLines:
    def test_default_hsn_and_description(self, composer, make_order):
        doc = composer.compose(make_order(), InvoiceMode.RETAILER_MEMO)
        line = doc.lines[0]
        assert line.line_no == 1
        assert line.hsn_code == DEFAULT_HSN_CODE
        assert line.description == "Anarkali Kurti (Red / S-XXL)"
        assert line.pieces == 30
        assert line.amount == Decimal("3000.00")

    @pytest.mark.parametrize("mode", list(InvoiceMode))
    def test_subtotal_equals_line_sum(self, composer, make_order, sample_item, mode):
        odd = OrderItem(
            product_id="prod-dupatta",
            variant_id="var-dupatta",
            product_name="Dupatta",
            price_per_piece=Decimal("33.33"),
            pieces_per_set=7,
            quantity_sets=3,
            hsn_code="621420",
        )
        doc = composer.compose(make_order(items=[sample_item, odd]), mode)
        assert doc.subtotal == sum(line.amount for line in doc.lines)
        assert doc.lines[1].amount == Decimal("699.93")
        assert doc.lines[1].hsn_code == "621420"

    def test_empty_order_rejected(self, composer, make_order):
        with pytest.raises(ValidationError):
            composer.compose(make_order(items=[]), InvoiceMode.RETAILER_MEMO)


def test_rendering_is_deterministic(composer, make_order):
    order = make_order()
    first = composer.compose(order, InvoiceMode.INTERMEDIARY_TAX_INVOICE).render()
    second = InvoiceComposer(seller_gstin="07AJIPH1947G1Z9").compose(
        order, InvoiceMode.INTERMEDIARY_TAX_INVOICE
    ).render()
    assert first == second
    assert b'"grand_total":"3055.50"' in first
