"""Commercial pricing rule endpoints."""

from fastapi import APIRouter, Depends, status

from orderflow.api.dependencies import get_manage_pricing_rules_use_case
from orderflow.application.dto.requests import CreatePricingRuleRequest
from orderflow.application.dto.responses import ErrorResponse, PricingRuleResponse
from orderflow.application.use_cases import ManagePricingRulesUseCase

router = APIRouter(prefix="/api/pricing-rules", tags=["pricing"])


@router.post(
    "",
    response_model=PricingRuleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_rule(
    request: CreatePricingRuleRequest,
    use_case: ManagePricingRulesUseCase = Depends(get_manage_pricing_rules_use_case),
) -> PricingRuleResponse:
    """Add a rule. It applies to orders priced from now on."""
    rule = await use_case.create_rule(request)
    return use_case.to_response(rule)


@router.get("", response_model=list[PricingRuleResponse])
async def list_rules(
    use_case: ManagePricingRulesUseCase = Depends(get_manage_pricing_rules_use_case),
) -> list[PricingRuleResponse]:
    return [use_case.to_response(r) for r in await use_case.list_rules()]


@router.delete(
    "/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_rule(
    rule_id: str,
    use_case: ManagePricingRulesUseCase = Depends(get_manage_pricing_rules_use_case),
) -> None:
    await use_case.delete_rule(rule_id)
