"""Ledger Use Cases: record transactions, read dues and agent commissions."""

from dataclasses import dataclass, field
from decimal import Decimal

from orderflow.application.dto.requests import RecordTransactionRequest, UpsertAccountRequest
from orderflow.application.dto.responses import (
    AccountResponse,
    CommissionRecordResponse,
    CommissionSummaryResponse,
    DuesResponse,
    TransactionResponse,
)
from orderflow.application.services import get_financial_ledger
from orderflow.config import get_logger
from orderflow.core.entities.account import Account
from orderflow.core.entities.common import to_money, utcnow
from orderflow.core.entities.ledger import CommissionSummary, Transaction
from orderflow.core.exceptions import AccountNotFoundError
from orderflow.core.interfaces.account_store import IAccountStore
from orderflow.core.interfaces.ledger_store import ILedgerStore
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.core.services.financial_ledger import FinancialLedger

logger = get_logger(__name__)

# Transactions echoed back with a dues read; the balance always uses full history
RECENT_TRANSACTIONS = 50


@dataclass
class DuesResult:
    account_id: str
    outstanding_dues: Decimal
    transaction_count: int
    recent: list[Transaction] = field(default_factory=list)


class ManageLedgerUseCase:
    """
    Ledger writes and projections.

    Dues and commissions are folded from the complete history on every
    call; no balance is stored anywhere.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        account_store: IAccountStore | None = None,
        order_store: IOrderStore | None = None,
        financial_ledger: FinancialLedger | None = None,
    ):
        self._ledger_store = ledger_store
        self._account_store = account_store
        self._order_store = order_store
        self._ledger = financial_ledger or get_financial_ledger()

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from orderflow.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_account_store(self) -> IAccountStore:
        if self._account_store is None:
            from orderflow.infrastructure.storage.sqlite import get_account_store

            self._account_store = await get_account_store()
        return self._account_store

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from orderflow.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def upsert_account(self, request: UpsertAccountRequest) -> Account:
        account = await (await self._get_account_store()).upsert_account(
            Account(**request.model_dump())
        )
        logger.info(
            "account_upserted",
            account_id=account.id,
            assigned_agent_id=account.assigned_agent_id,
        )
        return account

    async def get_account(self, account_id: str) -> Account:
        account = await (await self._get_account_store()).get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def record_transaction(self, request: RecordTransactionRequest) -> Transaction:
        transaction = Transaction(
            account_id=request.account_id,
            type=request.type,
            amount=to_money(request.amount),
            date=request.date or utcnow(),
            description=request.description,
            reference_id=request.reference_id,
            created_by=request.created_by,
        )
        transaction = await (await self._get_ledger_store()).add_transaction(transaction)
        logger.info(
            "transaction_recorded",
            transaction_id=transaction.id,
            account_id=transaction.account_id,
            type=transaction.type.value,
            amount=str(transaction.amount),
        )
        return transaction

    async def list_transactions(
        self, account_id: str | None = None, limit: int | None = 100
    ) -> list[Transaction]:
        return await (await self._get_ledger_store()).list_transactions(
            account_id=account_id, limit=limit
        )

    async def outstanding_dues(self, account_id: str) -> DuesResult:
        history = await (await self._get_ledger_store()).list_transactions(
            account_id=account_id, limit=None
        )
        return DuesResult(
            account_id=account_id,
            outstanding_dues=self._ledger.outstanding_dues(history),
            transaction_count=len(history),
            recent=history[:RECENT_TRANSACTIONS],
        )

    # ------------------------------------------------------------------
    # Commissions
    # ------------------------------------------------------------------

    async def agent_commissions(self, agent_id: str) -> CommissionSummary:
        accounts = await (await self._get_account_store()).list_by_agent(agent_id)
        orders = await (await self._get_order_store()).list_orders(
            account_ids=[a.id for a in accounts], limit=None
        )
        summary = self._ledger.commission_summary(agent_id, orders, accounts)
        logger.info(
            "agent_commissions_computed",
            agent_id=agent_id,
            accounts=len(accounts),
            records=len(summary.records),
        )
        return summary

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    @staticmethod
    def to_dues_response(result: DuesResult) -> DuesResponse:
        return DuesResponse(
            account_id=result.account_id,
            outstanding_dues=result.outstanding_dues,
            transaction_count=result.transaction_count,
            transactions=[TransactionResponse.from_transaction(t) for t in result.recent],
        )

    @staticmethod
    def to_commission_response(summary: CommissionSummary) -> CommissionSummaryResponse:
        return CommissionSummaryResponse(
            agent_id=summary.agent_id,
            records=[
                CommissionRecordResponse(
                    order_id=r.order_id,
                    account_id=r.account_id,
                    account_name=r.account_name,
                    order_date=r.order_date,
                    order_value=r.order_value,
                    commission=r.commission,
                    status=r.status.value,
                )
                for r in summary.records
            ],
            total_paid=summary.total_paid,
            total_pending=summary.total_pending,
        )

    @staticmethod
    def to_account_response(account: Account) -> AccountResponse:
        return AccountResponse.from_account(account)
