"""Trade persistence and strategy associations."""

import datetime as dt
from typing import Sequence

from sqlalchemy import delete
from sqlmodel import Session, select, col

from journal.models.strategy import Strategy
from journal.models.trade import Trade, TradeStrategyLink
from journal.services.errors import TradeNotFoundError


class TradeRepository:
    """Trade reads/writes scoped to the owning user.

    Writes are flushed, never committed; the caller owns the transaction.
    Listings come back in creation order, which analytics rely on.
    """

    def __init__(self, session: Session):
        self._session = session

    def create(self, trade: Trade, strategy_ids: Sequence[int] = ()) -> Trade:
        self._session.add(trade)
        self._session.flush()
        self.replace_strategies(trade.id, trade.user_id, strategy_ids)
        return trade

    def get_by_id(self, trade_id: int, user_id: int, for_update: bool = False) -> Trade:
        stmt = select(Trade).where(Trade.id == trade_id, Trade.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        trade = self._session.exec(stmt).first()
        if trade is None:
            raise TradeNotFoundError(trade_id)
        return trade

    def update(self, trade: Trade, strategy_ids: Sequence[int] | None = None) -> Trade:
        trade.updated_at = dt.datetime.now(dt.timezone.utc)
        self._session.add(trade)
        self._session.flush()
        if strategy_ids is not None:
            self.replace_strategies(trade.id, trade.user_id, strategy_ids)
        return trade

    def delete(self, trade: Trade) -> None:
        self._session.exec(delete(TradeStrategyLink).where(TradeStrategyLink.trade_id == trade.id))
        self._session.delete(trade)
        self._session.flush()

    def list_by_owner(
        self,
        user_id: int,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> list[Trade]:
        stmt = select(Trade).where(Trade.user_id == user_id)
        return self._list(stmt, start_date, end_date)

    def list_by_account(
        self,
        account_id: int,
        user_id: int,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> list[Trade]:
        stmt = select(Trade).where(Trade.user_id == user_id, Trade.account_id == account_id)
        return self._list(stmt, start_date, end_date)

    def _list(self, stmt, start_date, end_date) -> list[Trade]:
        # Date bounds are inclusive on both ends
        if start_date is not None:
            stmt = stmt.where(Trade.date >= start_date)
        if end_date is not None:
            stmt = stmt.where(Trade.date <= end_date)
        return list(self._session.exec(stmt.order_by(Trade.id)).all())

    def get_strategies(self, trade_ids: Sequence[int]) -> dict[int, list[Strategy]]:
        """Strategies attached to each of ``trade_ids`` (missing ids map to [])."""
        result: dict[int, list[Strategy]] = {tid: [] for tid in trade_ids}
        if not trade_ids:
            return result
        rows = self._session.exec(
            select(TradeStrategyLink.trade_id, Strategy)
            .join(Strategy, Strategy.id == TradeStrategyLink.strategy_id)
            .where(col(TradeStrategyLink.trade_id).in_(list(trade_ids)))
            .order_by(Strategy.id)
        ).all()
        for trade_id, strategy in rows:
            result[trade_id].append(strategy)
        return result

    def replace_strategies(self, trade_id: int, user_id: int, strategy_ids: Sequence[int]) -> None:
        """Swap the trade's strategy tags; ids the user does not own are ignored."""
        self._session.exec(delete(TradeStrategyLink).where(TradeStrategyLink.trade_id == trade_id))
        wanted = set(strategy_ids)
        if wanted:
            owned = self._session.exec(
                select(Strategy.id).where(col(Strategy.id).in_(list(wanted)), Strategy.user_id == user_id)
            ).all()
            for strategy_id in sorted(owned):
                self._session.add(TradeStrategyLink(trade_id=trade_id, strategy_id=strategy_id))
        self._session.flush()
