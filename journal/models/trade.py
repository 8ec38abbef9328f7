"""Trade model — one logged market action or cash movement."""

import datetime as dt
from enum import Enum

from sqlmodel import SQLModel, Field


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


MARKET_TYPES = (TradeType.BUY, TradeType.SELL)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    account_id: int | None = Field(default=None, foreign_key="account.id", index=True)
    date: dt.date = Field(index=True)
    time: dt.time
    pair: str = ""
    type: str  # TradeType value
    entry: float = 0.0
    exit: float | None = None
    lots: float = 0.0

    # Derived by services.metrics
    pips: float | None = None
    pl: float | None = None
    rr: str | None = None  # e.g. "1:2" or "0.5:1"
    status: str = TradeStatus.OPEN.value

    stop_loss: float | None = None
    take_profit: float | None = None
    notes: str = ""
    mistakes: str = ""
    amount: float | None = None  # DEPOSIT / WITHDRAW only
    chart_before_url: str | None = None
    chart_after_url: str | None = None
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)


class TradeStrategyLink(SQLModel, table=True):
    __tablename__ = "trade_strategy"

    trade_id: int = Field(foreign_key="trade.id", primary_key=True)
    strategy_id: int = Field(foreign_key="strategy.id", primary_key=True)
