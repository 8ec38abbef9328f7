"""Pydantic schemas for Trade API."""

import datetime as dt

from pydantic import BaseModel, Field, field_serializer, field_validator

from journal.models.trade import TradeType
from journal.utils.constants import DATE_FORMAT, MAX_AMOUNT, MAX_LOTS, MAX_PRICE, TIME_FORMAT


class TradeWrite(BaseModel):
    """Fields a client sends when creating or replacing a trade.

    Derived values (pips, pl, rr, status) are always recomputed server-side.
    """

    account_id: int | None = None
    date: dt.date
    time: dt.time
    pair: str = Field(default="", max_length=32)
    type: TradeType
    entry: float = Field(default=0.0, ge=0, le=MAX_PRICE)
    exit: float | None = Field(default=None, ge=0, le=MAX_PRICE)
    lots: float = Field(default=0.0, ge=0, le=MAX_LOTS)
    stop_loss: float | None = Field(default=None, ge=0, le=MAX_PRICE)
    take_profit: float | None = Field(default=None, ge=0, le=MAX_PRICE)
    notes: str = ""
    mistakes: str = ""
    amount: float | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    strategy_ids: list[int] = []

    model_config = {"use_enum_values": True, "allow_inf_nan": False}

    @field_validator("pair")
    @classmethod
    def _normalise_pair(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        if isinstance(value, str):
            try:
                return dt.datetime.strptime(value, DATE_FORMAT).date()
            except ValueError:
                raise ValueError("must be a date in YYYY-MM-DD format")
        return value

    @field_validator("time", mode="before")
    @classmethod
    def _parse_time(cls, value):
        if isinstance(value, str):
            try:
                return dt.datetime.strptime(value, TIME_FORMAT).time()
            except ValueError:
                raise ValueError("must be a time in HH:MM format")
        return value


class TradeCreate(TradeWrite):
    pass


class TradeUpdate(TradeWrite):
    pass


class StrategyRef(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class TradeRead(BaseModel):
    id: int
    account_id: int | None
    date: dt.date
    time: dt.time
    pair: str
    type: str
    entry: float
    exit: float | None
    lots: float
    pips: float | None
    pl: float | None
    rr: str | None
    status: str
    stop_loss: float | None
    take_profit: float | None
    notes: str
    mistakes: str
    amount: float | None
    chart_before_url: str | None = None
    chart_after_url: str | None = None
    strategies: list[StrategyRef] = []
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}

    @field_serializer("date")
    def _serialize_date(self, value: dt.date) -> str:
        return value.strftime(DATE_FORMAT)

    @field_serializer("time")
    def _serialize_time(self, value: dt.time) -> str:
        return value.strftime(TIME_FORMAT)
