"""Database models."""

from journal.models.user import User
from journal.models.account import Account
from journal.models.strategy import Strategy
from journal.models.trade import Trade, TradeStrategyLink
from journal.models.ledger_event import LedgerEvent

__all__ = [
    "User",
    "Account",
    "Strategy",
    "Trade",
    "TradeStrategyLink",
    "LedgerEvent",
]
