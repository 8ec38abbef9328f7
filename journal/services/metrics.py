"""Stateless per-trade metric computation.

Derives pips, profit/loss, risk:reward and open/closed status from a trade's
price fields. All functions are pure computation with no database access.
"""

from dataclasses import dataclass

from journal.models.trade import MARKET_TYPES, TradeStatus, TradeType
from journal.utils.constants import JPY_PIP_MULTIPLIER, PIP_MULTIPLIER, PIP_VALUE_PER_LOT
from journal.utils.numeric import round_half_away, trim_decimal


@dataclass(frozen=True)
class TradeMetrics:
    """Derived fields for one trade. ``None`` means "not computed"."""

    status: str
    pips: float | None = None
    pl: float | None = None
    rr: str | None = None


def pip_multiplier(pair: str) -> float:
    """JPY-quoted pairs move in 0.01 steps, everything else in 0.0001."""
    return JPY_PIP_MULTIPLIER if "JPY" in pair else PIP_MULTIPLIER


def calculate_pips(pair: str, trade_type: str, entry: float, exit: float) -> float:
    """Signed pip distance from entry to exit, rounded to 2 decimals."""
    multiplier = pip_multiplier(pair)
    if trade_type == TradeType.BUY:
        pips = (exit - entry) * multiplier
    elif trade_type == TradeType.SELL:
        pips = (entry - exit) * multiplier
    else:
        pips = 0.0
    return round_half_away(pips)


def calculate_profit_loss(pips: float, lots: float) -> float:
    return pips * lots * PIP_VALUE_PER_LOT


def calculate_risk_reward(trade_type: str, entry: float, target: float, stop_loss: float) -> float:
    """Reward/risk ratio for a target price (exit or take profit).

    Returns 0 when the stop sits exactly on the entry.
    """
    if trade_type == TradeType.BUY:
        risk = entry - stop_loss
        reward = target - entry
    elif trade_type == TradeType.SELL:
        risk = stop_loss - entry
        reward = entry - target
    else:
        risk = reward = 0.0

    if risk == 0:
        return 0.0
    return round_half_away(reward / risk)


def format_risk_reward(ratio: float) -> str | None:
    """Render a ratio as "1:2" (ratio >= 1) or "0.5:1" (ratio < 1).

    A zero ratio has no meaningful rendering and yields None.
    """
    if ratio == 0:
        return None
    ratio = round_half_away(ratio)
    if ratio >= 1:
        return f"1:{trim_decimal(ratio)}"
    return f"{trim_decimal(ratio)}:1"


def calculate_trade_metrics(
    trade_type: str,
    pair: str,
    entry: float,
    lots: float,
    exit: float | None = None,
    stop_loss: float | None = None,
    take_profit: float | None = None,
) -> TradeMetrics:
    """Compute every derived field for a trade in one go.

    Risk:reward uses the actual exit when there is one and falls back to the
    take profit for a planned ratio. Pips and P&L only exist for closed
    BUY/SELL trades; cash movements never carry them.
    """
    rr = None
    if stop_loss is not None:
        target = exit if exit is not None else take_profit
        if target is not None:
            rr = format_risk_reward(calculate_risk_reward(trade_type, entry, target, stop_loss))

    if exit is None:
        return TradeMetrics(status=TradeStatus.OPEN.value, rr=rr)

    if trade_type not in MARKET_TYPES:
        return TradeMetrics(status=TradeStatus.CLOSED.value, rr=rr)

    pips = calculate_pips(pair, trade_type, entry, exit)
    pl = calculate_profit_loss(pips, lots)
    return TradeMetrics(status=TradeStatus.CLOSED.value, pips=pips, pl=pl, rr=rr)
