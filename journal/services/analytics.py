"""Performance analytics over a user's closed trades.

The calculations are pure functions over an ordered sequence of trades. Order
matters: streaks and drawdown are evaluated in the order the trades are given
(creation order when read from the database), not by trade date.
"""

from dataclasses import dataclass, asdict
from typing import Iterable, Protocol, Sequence

import numpy as np

from journal.models.trade import MARKET_TYPES
from journal.repositories.base import TradeStore
from journal.utils.numeric import parse_optional_float


class TradeLike(Protocol):
    type: str
    pl: float | str | None


@dataclass
class AnalyticsReport:
    total_pl: float = 0.0
    win_rate: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    consecutive_wins: int = 0
    consecutive_losses: int = 0
    best_streak: int = 0
    worst_streak: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class StreakSummary:
    current_wins: int
    current_losses: int
    best: int
    worst: int


def closed_trade_pls(trades: Iterable[TradeLike]) -> list[float]:
    """P&L of every BUY/SELL trade that has one, in input order.

    Open trades and cash movements (DEPOSIT/WITHDRAW) are dropped.
    """
    pls = []
    for trade in trades:
        if trade.type not in MARKET_TYPES:
            continue
        pl = parse_optional_float(trade.pl)
        if pl is not None:
            pls.append(pl)
    return pls


def compute_streaks(pls: Sequence[float]) -> StreakSummary:
    """Win/loss streaks; a break-even trade neither extends nor breaks a run."""
    current = 0
    best = 0
    worst = 0
    for pl in pls:
        if pl > 0:
            current = current + 1 if current > 0 else 1
            best = max(best, current)
        elif pl < 0:
            current = current - 1 if current < 0 else -1
            worst = min(worst, current)

    return StreakSummary(
        current_wins=current if current > 0 else 0,
        current_losses=-current if current < 0 else 0,
        best=best,
        worst=-worst,
    )


def compute_sharpe_ratio(pls: Sequence[float]) -> float:
    """Mean P&L over its population standard deviation (risk-free rate 0)."""
    if len(pls) < 2:
        return 0.0
    returns = np.asarray(pls, dtype=float)
    std = float(np.std(returns))
    if std == 0:
        return 0.0
    return float(np.mean(returns)) / std


def compute_max_drawdown(pls: Sequence[float]) -> float:
    """Largest peak-to-trough drop of the cumulative P&L curve, as a negative number.

    The curve starts at 0, so an initial losing run counts as drawdown.
    """
    if not pls:
        return 0.0
    equity = np.cumsum(np.asarray(pls, dtype=float))
    peaks = np.maximum.accumulate(np.maximum(equity, 0.0))
    max_drawdown = float(np.max(peaks - equity))
    return -max_drawdown if max_drawdown > 0 else 0.0


def calculate_analytics(trades: Iterable[TradeLike]) -> AnalyticsReport:
    """Build the full analytics report for a sequence of trades."""
    report = AnalyticsReport()
    pls = closed_trade_pls(trades)
    if not pls:
        return report

    wins = [pl for pl in pls if pl > 0]
    losses = [pl for pl in pls if pl < 0]
    total_win = sum(wins)
    total_loss = sum(abs(pl) for pl in losses)

    report.total_trades = len(pls)
    report.winning_trades = len(wins)
    report.losing_trades = len(losses)
    report.total_pl = sum(pls)
    report.largest_win = max(wins, default=0.0)
    report.largest_loss = min(losses, default=0.0)
    report.win_rate = len(wins) / len(pls) * 100

    if wins:
        report.avg_win = total_win / len(wins)
    if losses:
        report.avg_loss = -total_loss / len(losses)
    if total_loss > 0:
        report.profit_factor = total_win / total_loss

    streaks = compute_streaks(pls)
    report.consecutive_wins = streaks.current_wins
    report.consecutive_losses = streaks.current_losses
    report.best_streak = streaks.best
    report.worst_streak = streaks.worst

    report.sharpe_ratio = compute_sharpe_ratio(pls)
    report.max_drawdown = compute_max_drawdown(pls)
    return report


def get_user_analytics(trades: TradeStore, user_id: int, account_id: int | None = None) -> AnalyticsReport:
    """Analytics across all of a user's trades, or a single account's."""
    if account_id is not None:
        rows = trades.list_by_account(account_id, user_id)
    else:
        rows = trades.list_by_owner(user_id)
    return calculate_analytics(rows)
