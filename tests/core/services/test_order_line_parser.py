"""Tests for bulk order input parsing."""

from decimal import Decimal

import pytest

from orderflow.core.entities import ProductVariant
from orderflow.core.services.order_line_parser import find_variant, parse_csv, validate_lines


@pytest.fixture
def catalog(sample_variant):
    blue = ProductVariant(
        id="var-kurti-blue",
        product_id="prod-kurti",
        product_name="Anarkali Kurti",
        sku="AK-BLU-SXXL",
        color="Blue",
        size_range="S-XXL",
        stock=4,
        price_per_piece=Decimal("100.00"),
        pieces_per_set=6,
    )
    return [sample_variant, blue]


class TestFindVariant:
    def test_exact_sku_wins(self, catalog):
        assert find_variant("ak-blu-sxxl", catalog).id == "var-kurti-blue"

    def test_substring(self, catalog):
        assert find_variant("Blue", catalog).id == "var-kurti-blue"

    def test_blank_key(self, catalog):
        assert find_variant("  ", catalog) is None


class TestParseCsv:
    def test_mixed_rows(self, catalog):
        text = "\n".join(
            [
                "sku,qty",
                "AK-RED-SXXL,3",
                "ak-blu-sxxl,2",
                "unknown,1",
                "AK-RED-SXXL,abc",
                "AK-RED-SXXL,0",
                "AK-RED-SXXL, 2 ",
                "",
                "lonely",
            ]
        )
        result = parse_csv(text, catalog)

        assert result.quantities == {"var-kurti-red": 5, "var-kurti-blue": 2}
        assert [(u.line_no, u.reason) for u in result.unmatched] == [
            (4, "unknown_key"),
            (5, "invalid_quantity"),
            (6, "invalid_quantity"),
            (9, "malformed"),
        ]

    def test_without_header(self, catalog):
        result = parse_csv("AK-RED-SXXL,1", catalog)
        assert result.quantities == {"var-kurti-red": 1}

    @pytest.mark.parametrize("quantity", ["-3", "1.5", "two"])
    def test_non_positive_integers_never_coerced(self, catalog, quantity):
        result = parse_csv(f"AK-RED-SXXL,{quantity}", catalog)
        assert result.matched == []
        assert result.unmatched[0].reason == "invalid_quantity"

    def test_empty_text(self, catalog):
        result = parse_csv("", catalog)
        assert result.matched == []
        assert result.unmatched == []


class TestValidateLines:
    def test_assistant_lines(self, catalog):
        lines = [
            {"keyword": "kurti", "color": "blue", "quantity_sets": 2},
            {"keyword": "kurti", "quantitySets": 1},
            {"keyword": "", "quantity_sets": 1},
            {"keyword": "kurti", "quantity_sets": "2"},
            "nonsense",
            {"keyword": "saree", "quantity_sets": 1},
            {"keyword": "kurti", "quantity_sets": True},
        ]
        result = validate_lines(lines, catalog)

        assert [(m.variant_id, m.quantity_sets) for m in result.matched] == [
            ("var-kurti-blue", 2),
            ("var-kurti-red", 1),
        ]
        assert [(u.line_no, u.reason) for u in result.unmatched] == [
            (3, "malformed"),
            (4, "invalid_quantity"),
            (5, "malformed"),
            (6, "unknown_key"),
            (7, "invalid_quantity"),
        ]

    def test_size_narrows(self, catalog):
        result = validate_lines([{"keyword": "kurti", "size": "XXXL", "quantity_sets": 1}], catalog)
        assert result.unmatched[0].reason == "unknown_key"
