"""Analytics API — performance summary over closed trades."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from journal.database import get_session
from journal.models.user import User
from journal.repositories.trades import TradeRepository
from journal.schemas.analytics import AnalyticsRead
from journal.services.analytics import get_user_analytics
from journal.api.deps import get_current_user

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsRead)
def user_analytics(
    account_id: int | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    report = get_user_analytics(TradeRepository(session), user.id, account_id=account_id)
    return report.to_dict()
