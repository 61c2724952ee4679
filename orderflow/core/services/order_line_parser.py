"""
Order Line Parser.

Turns bulk order input into variant quantities: pasted CSV rows
(``key,quantity``) and line lists produced by an ordering assistant. Both
sources are untrusted; bad rows are reported back, never coerced.
"""

import csv
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from orderflow.config import get_logger
from orderflow.core.entities.inventory import ProductVariant

logger = get_logger(__name__)


@dataclass
class MatchedLine:
    """A row resolved to a catalog variant."""

    variant_id: str
    quantity_sets: int
    key: str


@dataclass
class UnmatchedLine:
    """A row that could not be used, with the reason."""

    line_no: int
    raw: str
    reason: str  # "invalid_quantity", "unknown_key", "malformed"


@dataclass
class ParseResult:
    matched: list[MatchedLine] = field(default_factory=list)
    unmatched: list[UnmatchedLine] = field(default_factory=list)

    @property
    def quantities(self) -> dict[str, int]:
        """Sets per variant, duplicates accumulated."""
        totals: dict[str, int] = {}
        for line in self.matched:
            totals[line.variant_id] = totals.get(line.variant_id, 0) + line.quantity_sets
        return totals


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _parse_quantity(value: str) -> int | None:
    value = value.strip()
    if not value.isdigit():
        return None
    quantity = int(value)
    return quantity if quantity > 0 else None


def find_variant(key: str, variants: Sequence[ProductVariant]) -> ProductVariant | None:
    """Exact SKU match first, then substring of the variant's search text."""
    key = key.strip().lower()
    if not key:
        return None
    for variant in variants:
        if variant.sku and variant.sku.lower() == key:
            return variant
    for variant in variants:
        if key in variant.search_text:
            return variant
    return None


def parse_csv(text: str, variants: Sequence[ProductVariant]) -> ParseResult:
    """
    Parse ``key,quantity`` rows.

    The first row is treated as a header when its second column is not
    numeric. Blank rows are ignored.
    """
    result = ParseResult()
    rows = list(csv.reader(text.splitlines()))
    if not rows:
        return result

    first = rows[0]
    start = 1 if len(first) > 1 and not _is_number(first[1].strip()) else 0

    for line_no, row in enumerate(rows[start:], start=start + 1):
        if not row or not any(cell.strip() for cell in row):
            continue
        raw = ",".join(row)
        if len(row) < 2:
            result.unmatched.append(UnmatchedLine(line_no, raw, "malformed"))
            continue

        key, quantity_text = row[0], row[1]
        quantity = _parse_quantity(quantity_text)
        if quantity is None:
            result.unmatched.append(UnmatchedLine(line_no, raw, "invalid_quantity"))
            continue

        variant = find_variant(key, variants)
        if variant is None:
            result.unmatched.append(UnmatchedLine(line_no, raw, "unknown_key"))
            continue

        result.matched.append(MatchedLine(variant.id, quantity, key.strip()))

    logger.info(
        "csv_lines_parsed",
        matched=len(result.matched),
        unmatched=len(result.unmatched),
    )
    return result


def _matches(variant: ProductVariant, keyword: str, color: str | None, size: str | None) -> bool:
    text = variant.search_text
    if keyword.lower() not in text:
        return False
    if color and color.strip().lower() not in text:
        return False
    return not (size and size.strip().lower() not in text)


def validate_lines(
    lines: Iterable[dict[str, Any]], variants: Sequence[ProductVariant]
) -> ParseResult:
    """
    Validate assistant-produced lines.

    Each line needs a non-empty ``keyword`` and an integer ``quantity_sets``
    above zero; ``color`` and ``size`` narrow the match when present.
    """
    result = ParseResult()
    for line_no, line in enumerate(lines, start=1):
        raw = repr(line)[:200]
        if not isinstance(line, dict):
            result.unmatched.append(UnmatchedLine(line_no, raw, "malformed"))
            continue

        keyword = line.get("keyword")
        quantity = line.get("quantity_sets", line.get("quantitySets"))
        if not isinstance(keyword, str) or not keyword.strip():
            result.unmatched.append(UnmatchedLine(line_no, raw, "malformed"))
            continue
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            result.unmatched.append(UnmatchedLine(line_no, raw, "invalid_quantity"))
            continue

        color = line.get("color") if isinstance(line.get("color"), str) else None
        size = line.get("size") if isinstance(line.get("size"), str) else None
        keyword = keyword.strip()

        variant = next((v for v in variants if _matches(v, keyword, color, size)), None)
        if variant is None:
            result.unmatched.append(UnmatchedLine(line_no, raw, "unknown_key"))
            continue

        result.matched.append(MatchedLine(variant.id, quantity, keyword))

    logger.info(
        "assistant_lines_validated",
        matched=len(result.matched),
        unmatched=len(result.unmatched),
    )
    return result
