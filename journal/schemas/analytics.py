"""Pydantic schemas for analytics and ledger audit responses."""

from datetime import datetime

from pydantic import BaseModel


class AnalyticsRead(BaseModel):
    total_pl: float
    win_rate: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    avg_win: float
    avg_loss: float
    profit_factor: float
    sharpe_ratio: float
    max_drawdown: float
    largest_win: float
    largest_loss: float
    consecutive_wins: int
    consecutive_losses: int
    best_streak: int
    worst_streak: int


class BalanceDriftRead(BaseModel):
    account_id: int
    account_name: str
    recorded_balance: float
    expected_balance: float
    drift: float
    corrected: bool = False

    model_config = {"from_attributes": True}


class LedgerEventRead(BaseModel):
    id: int
    account_id: int | None
    trade_id: int | None
    kind: str
    delta: float
    message: str | None
    timestamp: datetime

    model_config = {"from_attributes": True}
