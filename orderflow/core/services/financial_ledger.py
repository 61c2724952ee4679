"""
Financial Ledger projections.

Outstanding dues and agent commissions are recomputed from history on every
read. Nothing here keeps a running balance.
"""

from collections.abc import Iterable
from decimal import Decimal

from orderflow.core.entities.account import Account
from orderflow.core.entities.common import ZERO, to_money, to_whole
from orderflow.core.entities.ledger import (
    CommissionRecord,
    CommissionStatus,
    CommissionSummary,
    Transaction,
    TransactionType,
)
from orderflow.core.entities.order import Order, OrderStatus
from orderflow.core.exceptions import PreconditionNotMetError


class FinancialLedger:
    """Folds transactions into balances and orders into commissions."""

    DEFAULT_COMMISSION_RATE = Decimal("0.02")

    def __init__(self, commission_rate: Decimal | None = None):
        self._commission_rate = (
            commission_rate if commission_rate is not None else self.DEFAULT_COMMISSION_RATE
        )

    @staticmethod
    def outstanding_dues(transactions: Iterable[Transaction]) -> Decimal:
        """Σ debits (CHARGE, DEBIT_NOTE) − Σ credits (PAYMENT, CREDIT_NOTE)."""
        return to_money(sum((tx.signed_amount for tx in transactions), ZERO))

    def commission_for(self, order_value: Decimal) -> Decimal:
        """Agent earning on one order, rounded half-up to a whole rupee."""
        return to_money(to_whole(order_value * self._commission_rate))

    def agent_commissions(
        self,
        agent_id: str,
        orders: Iterable[Order],
        accounts: Iterable[Account],
    ) -> list[CommissionRecord]:
        """
        One record per order placed by an account assigned to the agent.

        Delivered orders are PAID, every other status (cancelled included)
        is PENDING.
        """
        assigned = {a.id: a for a in accounts if a.assigned_agent_id == agent_id}
        records = []
        for order in orders:
            account = assigned.get(order.account_id)
            if account is None:
                continue
            records.append(
                CommissionRecord(
                    agent_id=agent_id,
                    order_id=order.id,
                    account_id=order.account_id,
                    account_name=order.account_name or account.business_name,
                    order_date=order.created_at,
                    order_value=order.total_amount,
                    commission=self.commission_for(order.total_amount),
                    status=(
                        CommissionStatus.PAID
                        if order.status is OrderStatus.DELIVERED
                        else CommissionStatus.PENDING
                    ),
                )
            )
        return records

    def commission_summary(
        self,
        agent_id: str,
        orders: Iterable[Order],
        accounts: Iterable[Account],
    ) -> CommissionSummary:
        records = self.agent_commissions(agent_id, orders, accounts)
        return CommissionSummary(
            agent_id=agent_id,
            records=records,
            total_paid=sum(
                (r.commission for r in records if r.status is CommissionStatus.PAID), ZERO
            ),
            total_pending=sum(
                (r.commission for r in records if r.status is CommissionStatus.PENDING), ZERO
            ),
        )

    @staticmethod
    def charge_for_delivered_order(order: Order, created_by: str = "system") -> Transaction:
        """
        Build the CHARGE that puts a delivered credit order on the account.

        Only deferred-payment orders are charged; PAY_NOW orders settle
        outside the ledger.
        """
        if order.status is not OrderStatus.DELIVERED:
            raise PreconditionNotMetError(
                order.id, "status_delivered", "Only delivered orders are charged to the ledger"
            )
        if not order.payment_method.is_deferred:
            raise PreconditionNotMetError(
                order.id,
                "deferred_payment",
                "PAY_NOW orders are settled at checkout and never charged",
            )
        return Transaction(
            account_id=order.account_id,
            type=TransactionType.CHARGE,
            amount=order.total_amount,
            date=order.updated_at,
            description=f"Order #{order.id} delivered ({order.payment_method.value})",
            reference_id=order.id,
            created_by=created_by,
        )
