"""Balance audit — compare each account's stored balance with its trades.

The ledger updates balances incrementally and tolerates a failed delta, so a
stored balance can drift from the sum of its trades' ledger effects. This
module detects that drift and, on request, posts the correcting delta through
the same atomic balance primitive the ledger uses.

Edits to DEPOSIT/WITHDRAW amounts on the same account are not re-posted unless
``reconcile_cash_updates`` is enabled, so such edits show up here as drift.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from sqlmodel import Session

from journal.models.ledger_event import LedgerEvent
from journal.models.trade import Trade
from journal.repositories.accounts import AccountRepository
from journal.repositories.trades import TradeRepository
from journal.services.ledger import ledger_effect
from journal.utils.constants import BALANCE_REL_TOLERANCE, BALANCE_TOLERANCE

logger = logging.getLogger(__name__)


@dataclass
class BalanceDrift:
    account_id: int
    user_id: int
    account_name: str
    recorded_balance: float
    expected_balance: float
    drift: float
    corrected: bool = False


def expected_balance(trades: Iterable[Trade]) -> float:
    """Balance an account should hold given its trades (accounts start at 0)."""
    total = 0.0
    for trade in trades:
        effect = ledger_effect(trade)
        if effect is not None:
            total += effect
    return total


def audit_balances(
    session: Session,
    user_id: int | None = None,
    fix: bool = False,
    record: bool = True,
) -> list[BalanceDrift]:
    """Find accounts whose balance disagrees with their trades.

    Args:
        user_id: limit the audit to one user's accounts (all users when None)
        fix: post the correcting delta for every drifted account
        record: write LedgerEvent rows for drift and corrections
    """
    accounts = AccountRepository(session)
    trades = TradeRepository(session)
    rows = accounts.list_by_owner(user_id) if user_id is not None else accounts.list_all()

    drifts: list[BalanceDrift] = []
    for account in rows:
        expected = expected_balance(trades.list_by_account(account.id, account.user_id))
        drift = account.current_balance - expected
        if math.isclose(
            account.current_balance, expected,
            rel_tol=BALANCE_REL_TOLERANCE, abs_tol=BALANCE_TOLERANCE,
        ):
            continue

        logger.warning(
            f"Balance audit: account {account.id} ({account.name}) holds "
            f"{account.current_balance:.2f}, trades imply {expected:.2f} (drift {drift:+.2f})"
        )
        item = BalanceDrift(
            account_id=account.id,
            user_id=account.user_id,
            account_name=account.name,
            recorded_balance=account.current_balance,
            expected_balance=expected,
            drift=drift,
        )
        if record:
            session.add(
                LedgerEvent(
                    user_id=account.user_id,
                    account_id=account.id,
                    kind="balance_drift",
                    delta=drift,
                    message=f"Stored {account.current_balance:.2f}, expected {expected:.2f}",
                )
            )
        if fix:
            accounts.apply_balance_delta(account.id, account.user_id, -drift)
            item.corrected = True
            logger.info(f"Balance audit: account {account.id} corrected by {-drift:+.2f}")
            if record:
                session.add(
                    LedgerEvent(
                        user_id=account.user_id,
                        account_id=account.id,
                        kind="balance_corrected",
                        delta=-drift,
                        message=f"Balance reset to {expected:.2f}",
                    )
                )
        drifts.append(item)

    if record or fix:
        session.commit()

    logger.info(f"Balance audit: {len(rows)} accounts checked, {len(drifts)} drifted")
    return drifts
