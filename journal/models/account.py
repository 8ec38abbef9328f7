"""Account model — a trading account whose balance follows its trades."""

from datetime import datetime, timezone
from enum import Enum

from sqlmodel import SQLModel, Field


class AccountType(str, Enum):
    DEMO = "demo"
    LIVE = "live"


class Account(SQLModel, table=True):
    __tablename__ = "account"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    broker: str
    account_number: str
    account_type: str = AccountType.DEMO.value
    currency: str = "USD"
    # Only ever changed through AccountRepository.apply_balance_delta
    current_balance: float = 0.0
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
