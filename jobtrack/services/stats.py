"""Status and monthly-trend aggregation over one owner's jobs.

Both aggregations fail hard: a storage error surfaces as StorageError so the
caller can navigate away instead of rendering partial numbers.
"""
import logging
from collections import Counter
from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StorageError
from ..models import JOB_STATUSES, Job, utcnow
from .jobs import require_owner

logger = logging.getLogger(__name__)

TREND_WINDOW_MONTHS = 6
MONTH_LABEL_FORMAT = "%b %y"  # "Oct 25"


def get_status_counts(session: Session, owner_id: Optional[str]) -> dict[str, int]:
    """Count jobs per status bucket.

    Group keys are lower-cased before bucketing, so "Pending" and "PENDING"
    land in ``pending``. Values outside the category set are dropped.

    Returns:
        {"pending": N, "interview": N, "declined": N}
    """
    owner_id = require_owner(owner_id)
    try:
        rows = (
            session.query(Job.status, func.count(Job.id))
            .filter(Job.owner_id == owner_id)
            .group_by(Job.status)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Status aggregation failed for owner={owner_id}: {e}")
        raise StorageError() from e

    counts = {status: 0 for status in JOB_STATUSES}
    for status, count in rows:
        key = (status or "").lower()
        if key in counts:
            counts[key] += count
        else:
            logger.debug(f"Ignoring unknown status {status!r} ({count} jobs)")
    return counts


def trend_window(now: datetime) -> tuple[datetime, datetime]:
    """Inclusive [start, end] of the trailing window ending at ``now``."""
    return now - relativedelta(months=TREND_WINDOW_MONTHS), now


def get_monthly_trend(
    session: Session,
    owner_id: Optional[str],
    now: Optional[datetime] = None,
) -> list[dict]:
    """Applications per calendar month over the last six months.

    Only months with at least one job appear; jobs dated after ``now`` are
    left out.

    Returns:
        [{"label": "Aug 26", "count": 3}, {"label": "Oct 26", "count": 1}]
    """
    owner_id = require_owner(owner_id)
    now = now or utcnow()
    start, end = trend_window(now)

    try:
        created = (
            session.query(Job.created_at)
            .filter(
                Job.owner_id == owner_id,
                Job.created_at >= start,
                Job.created_at <= end,
            )
            .order_by(Job.created_at.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Trend aggregation failed for owner={owner_id}: {e}")
        raise StorageError() from e

    monthly = Counter((ts.year, ts.month) for (ts,) in created)
    return [
        {
            "label": datetime(year, month, 1).strftime(MONTH_LABEL_FORMAT),
            "count": count,
        }
        for (year, month), count in sorted(monthly.items())
    ]
