"""Trade ledger — trade create/update/delete and the balance bookkeeping around them.

Every trade posted to an account has one net *ledger effect* on that
account's balance:

- DEPOSIT with an amount: +amount
- WITHDRAW with an amount: -amount
- closed BUY/SELL: +pl (already signed)
- anything else (open trades, missing amount): none

Creating a trade applies its effect once, updating applies only the change,
and deleting reverts it. Each operation runs in one database transaction and
every balance delta runs in its own SAVEPOINT. A failed delta is logged and
recorded as a LedgerEvent but does not undo the trade write; the periodic
balance audit (services.reconciliation) picks up the drift.
"""

import datetime as dt
import logging
from contextlib import contextmanager
from typing import Sequence

from sqlmodel import Session

from journal.config import settings
from journal.models.ledger_event import LedgerEvent
from journal.models.trade import MARKET_TYPES, Trade, TradeType
from journal.repositories.accounts import AccountRepository
from journal.repositories.base import AccountBalanceStore, TradeStore
from journal.repositories.trades import TradeRepository
from journal.schemas.trade import TradeCreate, TradeRead, TradeUpdate, TradeWrite
from journal.services.errors import AccountRequiredError
from journal.services.metrics import calculate_trade_metrics

logger = logging.getLogger(__name__)


def ledger_effect(trade: Trade) -> float | None:
    """Signed amount this trade contributes to its account's balance, or None."""
    if trade.type == TradeType.DEPOSIT:
        return trade.amount
    if trade.type == TradeType.WITHDRAW:
        return -trade.amount if trade.amount is not None else None
    if trade.type in MARKET_TYPES:
        return trade.pl
    return None


class TradeLedgerService:
    """Trade operations for one request, bound to a database session."""

    def __init__(
        self,
        session: Session,
        trades: TradeStore | None = None,
        accounts: AccountBalanceStore | None = None,
    ):
        self._session = session
        self._trades = trades or TradeRepository(session)
        self._accounts = accounts or AccountRepository(session)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_trade(self, user_id: int, trade_id: int) -> TradeRead:
        trade = self._trades.get_by_id(trade_id, user_id)
        return self._to_read(trade)

    def list_trades(
        self,
        user_id: int,
        account_id: int | None = None,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> list[TradeRead]:
        if account_id is not None:
            trades = self._trades.list_by_account(account_id, user_id, start_date, end_date)
        else:
            trades = self._trades.list_by_owner(user_id, start_date, end_date)
        return self._to_read_many(trades)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_trade(self, user_id: int, data: TradeCreate) -> TradeRead:
        if data.account_id is None:
            raise AccountRequiredError()

        with self._transaction():
            self._check_account(data.account_id, user_id)
            trade = Trade(user_id=user_id)
            self._assign(trade, data)
            trade = self._trades.create(trade, data.strategy_ids)

            effect = ledger_effect(trade)
            if effect is not None:
                self._apply_delta(trade, trade.account_id, effect, "create")

            logger.info(
                f"Trade {trade.id} created for user {user_id}: {trade.type} {trade.pair} "
                f"status={trade.status} pl={trade.pl}"
            )
            result = self._to_read(trade)
        return result

    def update_trade(self, user_id: int, trade_id: int, data: TradeUpdate) -> TradeRead:
        with self._transaction():
            trade = self._trades.get_by_id(trade_id, user_id, for_update=True)
            if data.account_id is not None and data.account_id != trade.account_id:
                self._check_account(data.account_id, user_id)

            old_account_id = trade.account_id
            old_effect = ledger_effect(trade)
            old_pl = trade.pl

            self._assign(trade, data)
            trade = self._trades.update(trade, data.strategy_ids)

            new_effect = ledger_effect(trade)
            if old_account_id != trade.account_id:
                # Moving between accounts: take the old effect off the old
                # account first, then post the new one.
                if old_account_id is not None and old_effect is not None:
                    self._apply_delta(trade, old_account_id, -old_effect, "update:revert")
                if trade.account_id is not None and new_effect is not None:
                    self._apply_delta(trade, trade.account_id, new_effect, "update:apply")
            elif trade.account_id is not None:
                difference = self._same_account_difference(trade, old_effect, new_effect, old_pl)
                if difference:
                    self._apply_delta(trade, trade.account_id, difference, "update:difference")

            logger.info(f"Trade {trade.id} updated for user {user_id}")
            result = self._to_read(trade)
        return result

    def delete_trade(self, user_id: int, trade_id: int) -> None:
        with self._transaction():
            trade = self._trades.get_by_id(trade_id, user_id, for_update=True)
            effect = ledger_effect(trade)
            if trade.account_id is not None and effect is not None:
                self._apply_delta(trade, trade.account_id, -effect, "delete:revert")
            self._trades.delete(trade)
            logger.info(f"Trade {trade_id} deleted for user {user_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self):
        try:
            yield
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def _check_account(self, account_id: int, user_id: int) -> None:
        """Refuse to post to an account the user does not own."""
        self._accounts.get_by_id(account_id, user_id)

    @staticmethod
    def _assign(trade: Trade, data: TradeWrite) -> None:
        """Copy request fields onto the trade and recompute derived metrics."""
        trade.account_id = data.account_id
        trade.date = data.date
        trade.time = data.time
        trade.pair = data.pair
        trade.type = data.type
        trade.entry = data.entry
        trade.exit = data.exit
        trade.lots = data.lots
        trade.stop_loss = data.stop_loss
        trade.take_profit = data.take_profit
        trade.notes = data.notes
        trade.mistakes = data.mistakes
        trade.amount = data.amount

        metrics = calculate_trade_metrics(
            trade_type=trade.type,
            pair=trade.pair,
            entry=trade.entry,
            lots=trade.lots,
            exit=trade.exit,
            stop_loss=trade.stop_loss,
            take_profit=trade.take_profit,
        )
        trade.pips = metrics.pips
        trade.pl = metrics.pl
        trade.rr = metrics.rr
        trade.status = metrics.status

    @staticmethod
    def _same_account_difference(
        trade: Trade,
        old_effect: float | None,
        new_effect: float | None,
        old_pl: float | None,
    ) -> float:
        """Balance change for an edit that keeps the trade on the same account.

        Historically only BUY/SELL edits are reconciled (by P&L difference);
        cash movements are left alone unless reconcile_cash_updates is on.
        """
        if settings.reconcile_cash_updates:
            return (new_effect or 0.0) - (old_effect or 0.0)
        if trade.type in MARKET_TYPES:
            return (trade.pl or 0.0) - (old_pl or 0.0)
        return 0.0

    def _apply_delta(self, trade: Trade, account_id: int, amount: float, reason: str) -> None:
        """Post a balance delta; failures are recorded, never raised."""
        try:
            self._accounts.apply_balance_delta(account_id, trade.user_id, amount)
        except Exception as e:
            logger.error(
                f"Balance sync failed ({reason}) for trade {trade.id}, "
                f"account {account_id}, delta {amount:+.2f}: {e}"
            )
            self._session.add(
                LedgerEvent(
                    user_id=trade.user_id,
                    account_id=account_id,
                    trade_id=trade.id,
                    kind="balance_sync_failed",
                    delta=amount,
                    message=f"{reason}: {e}",
                )
            )

    def _to_read(self, trade: Trade) -> TradeRead:
        return self._to_read_many([trade])[0]

    def _to_read_many(self, trades: Sequence[Trade]) -> list[TradeRead]:
        strategies = self._trades.get_strategies([t.id for t in trades])
        return [
            TradeRead.model_validate(
                {
                    **t.model_dump(),
                    "strategies": [{"id": s.id, "name": s.name} for s in strategies.get(t.id, [])],
                }
            )
            for t in trades
        ]
