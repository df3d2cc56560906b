"""
Statistics API Endpoints

Aggregations fail hard: on a storage error the caller is sent back to the
job list instead of getting partial numbers.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..auth.jwt import get_current_owner
from ..db.database import get_db
from ..errors import StorageError
from ..schemas import MonthlyCount, StatusCounts
from ..services.stats import get_monthly_trend, get_status_counts

logger = logging.getLogger(__name__)

router = APIRouter()

FALLBACK_URL = "/jobs"


@router.get("", response_model=StatusCounts)
def status_counts(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Job counts per status"""
    try:
        return get_status_counts(db, owner_id)
    except StorageError:
        logger.warning(f"Stats unavailable for owner={owner_id}, redirecting")
        return RedirectResponse(FALLBACK_URL, status_code=303)


@router.get("/monthly", response_model=List[MonthlyCount])
def monthly_trend(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Applications per month over the last six months"""
    try:
        return get_monthly_trend(db, owner_id)
    except StorageError:
        logger.warning(f"Trend unavailable for owner={owner_id}, redirecting")
        return RedirectResponse(FALLBACK_URL, status_code=303)
