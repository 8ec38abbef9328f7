"""LedgerEvent model — audit trail for balance updates that need attention."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class LedgerEvent(SQLModel, table=True):
    __tablename__ = "ledger_event"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    account_id: int | None = Field(default=None, index=True)
    trade_id: int | None = None
    kind: str  # "balance_sync_failed", "balance_drift", "balance_corrected"
    delta: float = 0.0
    message: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
