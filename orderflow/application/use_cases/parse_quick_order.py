"""Parse Quick Order Use Case: resolve pasted rows or assistant lines to variant quantities."""

from orderflow.application.dto.requests import QuickOrderParseRequest
from orderflow.application.dto.responses import (
    QuickOrderLineResponse,
    QuickOrderParseResponse,
    QuickOrderUnmatchedResponse,
)
from orderflow.config import get_logger
from orderflow.core.exceptions import ValidationError
from orderflow.core.interfaces.inventory_store import IInventoryStore
from orderflow.core.services.order_line_parser import ParseResult, parse_csv, validate_lines

logger = get_logger(__name__)


class ParseQuickOrderUseCase:
    """
    Match bulk input against the whole catalog.

    Nothing is ordered here: the caller places an order from the returned
    quantities once the user has reviewed them.
    """

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from orderflow.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, request: QuickOrderParseRequest) -> ParseResult:
        has_text = bool(request.text and request.text.strip())
        if has_text == (request.lines is not None):
            raise ValidationError("text", "provide either pasted text or assistant lines")

        variants = await (await self._get_inventory_store()).list_variants(limit=None)
        if has_text:
            return parse_csv(request.text, variants)
        return validate_lines(request.lines, variants)

    def to_response(self, result: ParseResult) -> QuickOrderParseResponse:
        return QuickOrderParseResponse(
            quantities=result.quantities,
            matched=[
                QuickOrderLineResponse(
                    variant_id=m.variant_id, quantity_sets=m.quantity_sets, key=m.key
                )
                for m in result.matched
            ],
            unmatched=[
                QuickOrderUnmatchedResponse(line_no=u.line_no, raw=u.raw, reason=u.reason)
                for u in result.unmatched
            ],
        )
