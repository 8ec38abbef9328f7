"""System API — health check, scheduler status, balance audit and ledger events."""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from journal.database import get_session
from journal.models.ledger_event import LedgerEvent
from journal.models.user import User
from journal.schemas.analytics import BalanceDriftRead, LedgerEventRead
from journal.services.reconciliation import audit_balances
from journal.api.deps import get_current_user

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.get("/scheduler", dependencies=[Depends(get_current_user)])
def scheduler_status():
    """Current scheduler state with job details."""
    from journal.engine.scheduler import get_scheduler_status
    return get_scheduler_status()


@router.get("/reconcile", response_model=list[BalanceDriftRead])
def reconcile(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Dry-run balance audit for the current user's accounts."""
    return audit_balances(session, user_id=user.id, fix=False, record=False)


@router.get("/ledger-events", response_model=list[LedgerEventRead])
def ledger_events(
    kind: str | None = None,
    limit: int = 100,
    offset: int = 0,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = (
        select(LedgerEvent)
        .where(LedgerEvent.user_id == user.id)
        .order_by(LedgerEvent.timestamp.desc(), LedgerEvent.id.desc())
    )
    if kind is not None:
        stmt = stmt.where(LedgerEvent.kind == kind)
    stmt = stmt.offset(offset).limit(limit)
    return session.exec(stmt).all()
