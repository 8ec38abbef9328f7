"""CRUD API for strategies."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import delete
from sqlmodel import Session, select

from journal.database import get_session
from journal.models.strategy import Strategy
from journal.models.trade import TradeStrategyLink
from journal.models.user import User
from journal.schemas.strategy import StrategyCreate, StrategyUpdate, StrategyRead
from journal.services.errors import StrategyNotFoundError
from journal.api.deps import get_current_user

router = APIRouter(prefix="/api/strategies", tags=["strategies"])


def _get_owned(session: Session, strategy_id: int, user_id: int) -> Strategy:
    strategy = session.exec(
        select(Strategy).where(Strategy.id == strategy_id, Strategy.user_id == user_id)
    ).first()
    if not strategy:
        raise StrategyNotFoundError(strategy_id)
    return strategy


@router.get("", response_model=list[StrategyRead])
def list_strategies(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return session.exec(
        select(Strategy).where(Strategy.user_id == user.id).order_by(Strategy.name)
    ).all()


@router.post("", response_model=StrategyRead, status_code=201)
def create_strategy(
    data: StrategyCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = Strategy(user_id=user.id, **data.model_dump())
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.get("/{strategy_id}", response_model=StrategyRead)
def get_strategy(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return _get_owned(session, strategy_id, user.id)


@router.put("/{strategy_id}", response_model=StrategyRead)
def update_strategy(
    strategy_id: int,
    data: StrategyUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = _get_owned(session, strategy_id, user.id)
    strategy.name = data.name
    strategy.description = data.description
    strategy.updated_at = datetime.now(timezone.utc)

    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.delete("/{strategy_id}", status_code=204)
def delete_strategy(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = _get_owned(session, strategy_id, user.id)
    # Untag trades first; the trades themselves stay.
    session.exec(delete(TradeStrategyLink).where(TradeStrategyLink.strategy_id == strategy_id))
    session.delete(strategy)
    session.commit()
