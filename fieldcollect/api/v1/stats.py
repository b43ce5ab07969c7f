"""
Stats endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fieldcollect.core.authorization import Action
from fieldcollect.core.deps import get_db, require_action
from fieldcollect.models.user import User
from fieldcollect.schemas.stats import StatsOut
from fieldcollect.services.stats_service import get_stats

router = APIRouter()


@router.get("", response_model=StatsOut)
async def get_stats_endpoint(
    period: Optional[str] = Query(None, description="day, week or month; anything else means day"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_STATS)),
):
    """
    Record totals, per-collector counts and per-period counts (viewStats)

    Always computed over every record, regardless of list filters.
    """
    return get_stats(db, period)
