"""
Temporal aggregation engine - record counts per agent and per period

Stats are recomputed from a full snapshot on each call; there are no
incremental counters to invalidate.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from fieldcollect.models.record import Record
from fieldcollect.models.user import User
from fieldcollect.schemas.stats import AgentCount, PeriodCount, StatsOut, StatsPeriod
from fieldcollect.utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)


def normalize_period(period: Any) -> StatsPeriod:
    """Unknown or missing periods fall back to day; never raises. Matching is exact."""
    if isinstance(period, StatsPeriod):
        return period
    try:
        return StatsPeriod(period)
    except ValueError:
        if period is not None:
            logger.debug("Unrecognised stats period %r, using day", period)
        return StatsPeriod.DAY


def bucket_key(created_at: datetime, period: StatsPeriod) -> str:
    """
    Bucket label for a timestamp, computed on the UTC calendar date.

    day   -> YYYY-MM-DD
    week  -> "W " + the Sunday starting the week, YYYY-MM-DD
    month -> YYYY-MM
    """
    day = ensure_utc(created_at).date()
    if period == StatsPeriod.WEEK:
        # weekday(): Monday=0 .. Sunday=6
        sunday = day - timedelta(days=(day.weekday() + 1) % 7)
        return f"W {sunday.isoformat()}"
    if period == StatsPeriod.MONTH:
        return f"{day.year:04d}-{day.month:02d}"
    return day.isoformat()


def display_name(user_id: int, names: dict) -> str:
    return names.get(user_id) or f"Agent #{user_id}"


def compute_stats(records: Iterable[Any], users: Iterable[Any], period: Any = None) -> StatsOut:
    """
    Aggregate a snapshot of records.

    Args:
        records: every record, unfiltered
        users: actors used to resolve collector names
        period: day, week or month; anything else means day

    Returns:
        StatsOut with totals, per-collector counts (ascending id) and
        per-period counts (ascending label). Records without created_at
        count towards the totals but not towards any period.
    """
    period = normalize_period(period)
    names = {u.id: u.full_name for u in users}

    total = 0
    per_agent: Counter = Counter()
    per_period: Counter = Counter()

    for record in records:
        total += 1
        per_agent[record.collected_by] += 1
        if record.created_at is not None:
            per_period[bucket_key(record.created_at, period)] += 1

    return StatsOut(
        total_records=total,
        records_per_agent=[
            AgentCount(agent_id=agent_id, agent_name=display_name(agent_id, names), count=count)
            for agent_id, count in sorted(per_agent.items())
        ],
        records_by_period=[
            PeriodCount(date=key, count=count)
            for key, count in sorted(per_period.items())
        ],
    )


def get_stats(db: Session, period: Optional[str] = None) -> StatsOut:
    """Load the full record and user snapshot and aggregate it"""
    records = db.query(Record).order_by(Record.id).all()
    users = db.query(User).all()
    return compute_stats(records, users, period)
