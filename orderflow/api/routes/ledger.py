"""Ledger endpoints: accounts, transactions, dues and agent commissions."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from orderflow.api.dependencies import get_manage_ledger_use_case
from orderflow.application.dto.requests import RecordTransactionRequest, UpsertAccountRequest
from orderflow.application.dto.responses import (
    AccountResponse,
    CommissionSummaryResponse,
    DuesResponse,
    ErrorResponse,
    TransactionResponse,
)
from orderflow.application.use_cases import ManageLedgerUseCase

router = APIRouter(prefix="/api/ledger", tags=["ledger"])


@router.put(
    "/accounts/{account_id}",
    response_model=AccountResponse,
    responses={400: {"model": ErrorResponse}},
)
async def upsert_account(
    account_id: str,
    request: UpsertAccountRequest,
    use_case: ManageLedgerUseCase = Depends(get_manage_ledger_use_case),
) -> AccountResponse:
    """Create or replace the account projection used for attribution."""
    if request.id != account_id:
        raise HTTPException(status_code=400, detail="Account ID in path and body differ")
    account = await use_case.upsert_account(request)
    return use_case.to_account_response(account)


@router.get(
    "/accounts/{account_id}",
    response_model=AccountResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_account(
    account_id: str,
    use_case: ManageLedgerUseCase = Depends(get_manage_ledger_use_case),
) -> AccountResponse:
    return use_case.to_account_response(await use_case.get_account(account_id))


@router.post(
    "/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def record_transaction(
    request: RecordTransactionRequest,
    use_case: ManageLedgerUseCase = Depends(get_manage_ledger_use_case),
) -> TransactionResponse:
    """Append a ledger entry. Amounts are positive; the type decides the sign."""
    transaction = await use_case.record_transaction(request)
    return TransactionResponse.from_transaction(transaction)


@router.get("/transactions", response_model=list[TransactionResponse])
async def list_transactions(
    account_id: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    use_case: ManageLedgerUseCase = Depends(get_manage_ledger_use_case),
) -> list[TransactionResponse]:
    transactions = await use_case.list_transactions(account_id=account_id, limit=limit)
    return [TransactionResponse.from_transaction(t) for t in transactions]


@router.get("/accounts/{account_id}/dues", response_model=DuesResponse)
async def get_dues(
    account_id: str,
    use_case: ManageLedgerUseCase = Depends(get_manage_ledger_use_case),
) -> DuesResponse:
    """Outstanding dues recomputed from the account's full history."""
    result = await use_case.outstanding_dues(account_id)
    return use_case.to_dues_response(result)


@router.get("/agents/{agent_id}/commissions", response_model=CommissionSummaryResponse)
async def get_commissions(
    agent_id: str,
    use_case: ManageLedgerUseCase = Depends(get_manage_ledger_use_case),
) -> CommissionSummaryResponse:
    """Commission per order of every account assigned to the agent."""
    summary = await use_case.agent_commissions(agent_id)
    return use_case.to_commission_response(summary)
