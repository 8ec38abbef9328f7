"""Trade journal API.

Writes go through the ledger service so account balances stay in step.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from journal.models.user import User
from journal.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from journal.services.ledger import TradeLedgerService
from journal.api.deps import get_current_user, get_ledger

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=list[TradeRead])
def list_trades(
    account_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    user: User = Depends(get_current_user),
    ledger: TradeLedgerService = Depends(get_ledger),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")
    return ledger.list_trades(user.id, account_id=account_id, start_date=start_date, end_date=end_date)


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    user: User = Depends(get_current_user),
    ledger: TradeLedgerService = Depends(get_ledger),
):
    return ledger.create_trade(user.id, data)


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    ledger: TradeLedgerService = Depends(get_ledger),
):
    return ledger.get_trade(user.id, trade_id)


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: int,
    data: TradeUpdate,
    user: User = Depends(get_current_user),
    ledger: TradeLedgerService = Depends(get_ledger),
):
    return ledger.update_trade(user.id, trade_id, data)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    ledger: TradeLedgerService = Depends(get_ledger),
):
    ledger.delete_trade(user.id, trade_id)
