"""Account persistence, including the atomic balance primitive."""

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlmodel import Session, select

from journal.models.account import Account
from journal.services.errors import AccountNotFoundError

logger = logging.getLogger(__name__)


class AccountRepository:
    """Account reads/writes scoped to the owning user.

    Balances are changed with SQL-side UPDATEs, so reads always refresh rows
    already loaded in the session.
    """

    def __init__(self, session: Session):
        self._session = session

    def get_by_id(self, account_id: int, user_id: int) -> Account:
        account = self._session.exec(
            select(Account)
            .where(Account.id == account_id, Account.user_id == user_id)
            .execution_options(populate_existing=True)
        ).first()
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def list_by_owner(self, user_id: int) -> list[Account]:
        return list(
            self._session.exec(
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.id)
                .execution_options(populate_existing=True)
            ).all()
        )

    def list_all(self) -> list[Account]:
        return list(
            self._session.exec(
                select(Account).order_by(Account.id).execution_options(populate_existing=True)
            ).all()
        )

    def apply_balance_delta(self, account_id: int, user_id: int, amount: float) -> Account:
        """Add ``amount`` to the balance in a single UPDATE.

        The addition happens in SQL so concurrent deltas on the same account
        never overwrite each other. Runs inside a SAVEPOINT: if it fails only
        the delta is rolled back, not the caller's transaction.
        """
        table = Account.__table__
        with self._session.begin_nested():
            result = self._session.connection().execute(
                update(table)
                .where(table.c.id == account_id, table.c.user_id == user_id)
                .values(
                    current_balance=table.c.current_balance + amount,
                    updated_at=datetime.now(timezone.utc),
                )
            )
            if result.rowcount == 0:
                raise AccountNotFoundError(account_id)

        account = self._session.get(Account, account_id, populate_existing=True)
        logger.debug(
            f"Account {account_id}: balance {amount:+.2f} -> {account.current_balance:.2f}"
        )
        return account
