"""Quick order endpoint: bulk rows to variant quantities."""

from fastapi import APIRouter, Depends

from orderflow.api.dependencies import get_parse_quick_order_use_case
from orderflow.application.dto.requests import QuickOrderParseRequest
from orderflow.application.dto.responses import ErrorResponse, QuickOrderParseResponse
from orderflow.application.use_cases import ParseQuickOrderUseCase

router = APIRouter(prefix="/api/quick-order", tags=["orders"])


@router.post(
    "/parse",
    response_model=QuickOrderParseResponse,
    responses={400: {"model": ErrorResponse}},
)
async def parse_quick_order(
    request: QuickOrderParseRequest,
    use_case: ParseQuickOrderUseCase = Depends(get_parse_quick_order_use_case),
) -> QuickOrderParseResponse:
    """
    Match pasted ``key,quantity`` rows or assistant lines against the catalog.

    Unknown keys and bad quantities come back in ``unmatched``; nothing is
    ordered until the caller places an order.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)
