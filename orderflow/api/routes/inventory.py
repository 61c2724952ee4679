"""Inventory management endpoints."""

from fastapi import APIRouter, Depends, Query, status

from orderflow.api.dependencies import get_manage_inventory_use_case
from orderflow.application.dto.requests import AdjustStockRequest, CreateVariantRequest
from orderflow.application.dto.responses import (
    ErrorResponse,
    StockMovementResponse,
    VariantListResponse,
    VariantResponse,
)
from orderflow.application.use_cases import ManageInventoryUseCase

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post(
    "/variants",
    response_model=VariantResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_variant(
    request: CreateVariantRequest,
    use_case: ManageInventoryUseCase = Depends(get_manage_inventory_use_case),
) -> VariantResponse:
    """Add a catalog variant with its opening stock in sets."""
    variant = await use_case.create_variant(request)
    return use_case.to_response(variant)


@router.get("/variants", response_model=VariantListResponse)
async def list_variants(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    use_case: ManageInventoryUseCase = Depends(get_manage_inventory_use_case),
) -> VariantListResponse:
    variants = await use_case.list_variants(limit=limit, offset=offset)
    return use_case.to_list_response(variants)


@router.get(
    "/variants/{variant_id}",
    response_model=VariantResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_variant(
    variant_id: str,
    use_case: ManageInventoryUseCase = Depends(get_manage_inventory_use_case),
) -> VariantResponse:
    return use_case.to_response(await use_case.get_variant(variant_id))


@router.post(
    "/variants/{variant_id}/adjust",
    response_model=VariantResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def adjust_stock(
    variant_id: str,
    request: AdjustStockRequest,
    use_case: ManageInventoryUseCase = Depends(get_manage_inventory_use_case),
) -> VariantResponse:
    """Admin correction. SET replaces the count; DELTA adds to it, floored at zero."""
    variant = await use_case.adjust_stock(variant_id, request)
    return use_case.to_response(variant)


@router.get(
    "/variants/{variant_id}/movements",
    response_model=list[StockMovementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_movements(
    variant_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    use_case: ManageInventoryUseCase = Depends(get_manage_inventory_use_case),
) -> list[StockMovementResponse]:
    """Movement history for one variant, newest first."""
    movements = await use_case.get_movements(variant_id, limit=limit)
    return use_case.to_movement_responses(movements)
