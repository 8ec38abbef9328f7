"""Pydantic schemas for Account API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from journal.models.account import AccountType


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    broker: str = Field(min_length=1, max_length=120)
    account_number: str = Field(min_length=1, max_length=64)
    account_type: AccountType = AccountType.DEMO.value
    currency: str = Field(default="USD", min_length=3, max_length=3)
    is_active: bool = True

    model_config = {"use_enum_values": True}

    @field_validator("name", "broker", "account_number")
    @classmethod
    def _trim_required_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()


class AccountUpdate(AccountCreate):
    pass


class AccountRead(BaseModel):
    id: int
    name: str
    broker: str
    account_number: str
    account_type: str
    currency: str
    current_balance: float
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
