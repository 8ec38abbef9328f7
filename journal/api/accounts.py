"""CRUD API for trading accounts.

Balances are read-only here; they move only through trades.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from journal.database import get_session
from journal.models.account import Account
from journal.models.trade import Trade
from journal.models.user import User
from journal.repositories.accounts import AccountRepository
from journal.schemas.account import AccountCreate, AccountUpdate, AccountRead
from journal.api.deps import get_current_user

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=list[AccountRead])
def list_accounts(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return AccountRepository(session).list_by_owner(user.id)


@router.post("", response_model=AccountRead, status_code=201)
def create_account(
    data: AccountCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    account = Account(user_id=user.id, **data.model_dump())
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@router.get("/{account_id}", response_model=AccountRead)
def get_account(
    account_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return AccountRepository(session).get_by_id(account_id, user.id)


@router.put("/{account_id}", response_model=AccountRead)
def update_account(
    account_id: int,
    data: AccountUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    account = AccountRepository(session).get_by_id(account_id, user.id)
    for key, value in data.model_dump().items():
        setattr(account, key, value)
    account.updated_at = datetime.now(timezone.utc)

    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    account = AccountRepository(session).get_by_id(account_id, user.id)

    trade = session.exec(
        select(Trade).where(Trade.account_id == account_id, Trade.user_id == user.id)
    ).first()
    if trade:
        raise HTTPException(
            status_code=409,
            detail="Cannot delete account with trades. Move or delete them first.",
        )

    session.delete(account)
    session.commit()
