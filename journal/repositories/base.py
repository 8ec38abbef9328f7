"""Persistence contracts the ledger depends on."""

import datetime as dt
from typing import Protocol, Sequence

from journal.models.account import Account
from journal.models.strategy import Strategy
from journal.models.trade import Trade


class AccountBalanceStore(Protocol):
    def get_by_id(self, account_id: int, user_id: int) -> Account:
        """Owned account or AccountNotFoundError."""
        ...

    def apply_balance_delta(self, account_id: int, user_id: int, amount: float) -> Account:
        """Atomically add ``amount`` to the account balance.

        Raises AccountNotFoundError when the account does not exist or is
        owned by someone else.
        """
        ...


class TradeStore(Protocol):
    def create(self, trade: Trade, strategy_ids: Sequence[int] = ()) -> Trade: ...

    def get_by_id(self, trade_id: int, user_id: int, for_update: bool = False) -> Trade: ...

    def update(self, trade: Trade, strategy_ids: Sequence[int] | None = None) -> Trade: ...

    def delete(self, trade: Trade) -> None: ...

    def list_by_owner(
        self,
        user_id: int,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> list[Trade]: ...

    def list_by_account(
        self,
        account_id: int,
        user_id: int,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
    ) -> list[Trade]: ...

    def get_strategies(self, trade_ids: Sequence[int]) -> dict[int, list[Strategy]]: ...

    def replace_strategies(self, trade_id: int, user_id: int, strategy_ids: Sequence[int]) -> None: ...
