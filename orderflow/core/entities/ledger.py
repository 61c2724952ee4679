"""Financial ledger entities."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from orderflow.core.entities.common import ZERO, new_id, utcnow


class TransactionType(str, Enum):
    """Ledger entry kinds. CHARGE and DEBIT_NOTE raise dues; the rest lower them."""

    PAYMENT = "PAYMENT"
    CHARGE = "CHARGE"
    CREDIT_NOTE = "CREDIT_NOTE"
    DEBIT_NOTE = "DEBIT_NOTE"

    @property
    def is_debit(self) -> bool:
        return self in (TransactionType.CHARGE, TransactionType.DEBIT_NOTE)


class Transaction(BaseModel):
    """A single ledger entry against an account."""

    id: str = Field(default_factory=lambda: new_id("tx"))
    account_id: str
    type: TransactionType
    amount: Decimal = Field(..., gt=0)
    date: datetime = Field(default_factory=utcnow)
    description: str = ""
    reference_id: str | None = None
    created_by: str = "system"

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type.is_debit else -self.amount


class CommissionStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"


class CommissionRecord(BaseModel):
    """Read-time projection of an agent's earning on one order. Never stored."""

    agent_id: str
    order_id: str
    account_id: str
    account_name: str = ""
    order_date: datetime
    order_value: Decimal
    commission: Decimal
    status: CommissionStatus


class CommissionSummary(BaseModel):
    agent_id: str
    records: list[CommissionRecord] = Field(default_factory=list)
    total_paid: Decimal = ZERO
    total_pending: Decimal = ZERO
