"""Account projection of the external user directory."""

from datetime import datetime

from pydantic import BaseModel, Field

from orderflow.core.entities.common import utcnow


class Account(BaseModel):
    """The fields of a retailer/distributor account the engine relies on."""

    id: str
    business_name: str
    city: str | None = None
    gstin: str | None = None
    assigned_agent_id: str | None = None
    intermediary_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
