"""Job queries and mutations, always scoped to one owner.

Every single-record access goes through ``_owned()`` plus an id filter, so an
id alone never authorizes anything.

Usage:
    from jobtrack.services.jobs import list_jobs, create_job

    page = list_jobs(session, owner_id, search="python", status="pending")
    job = create_job(session, owner_id, {"position": "...", ...})
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..errors import NotFoundOrUnauthorized, StorageError, Unauthenticated, ValidationError
from ..models import Job, utcnow
from ..schemas import JobCreate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
STATUS_ALL = "all"


@dataclass
class JobPage:
    """One page of a filtered job listing."""
    jobs: list[Job] = field(default_factory=list)
    count: int = 0
    page: int = 1
    total_pages: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def require_owner(owner_id: Optional[str]) -> str:
    """Reject calls without a resolved identity."""
    if not owner_id or not str(owner_id).strip():
        raise Unauthenticated()
    return owner_id


def _owned(session: Session, owner_id: str) -> Query:
    """Base query: only jobs belonging to ``owner_id``."""
    return session.query(Job).filter(Job.owner_id == owner_id)


def _validate(fields: dict[str, Any]) -> JobCreate:
    """Run the write schema, turning pydantic errors into field messages."""
    try:
        return JobCreate.model_validate(fields)
    except PydanticValidationError as e:
        errors = {}
        for err in e.errors():
            name = str(err["loc"][0]) if err["loc"] else "__root__"
            errors.setdefault(name, err["msg"])
        raise ValidationError(errors) from e


def _coerce_page(page: Any) -> int:
    try:
        value = int(page)
    except (TypeError, ValueError, OverflowError):
        return 1
    return value if value >= 1 else 1


def _coerce_page_size(page_size: Any) -> int:
    try:
        value = int(page_size)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError({"page_size": "must be a positive integer"})
    if value <= 0:
        raise ValidationError({"page_size": "must be a positive integer"})
    return value


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _filtered(
    session: Session,
    owner_id: str,
    search: Optional[str],
    status: Optional[str],
) -> Query:
    query = _owned(session, owner_id)

    term = (search or "").strip()
    if term:
        pattern = _like_pattern(term)
        query = query.filter(
            or_(
                Job.position.ilike(pattern, escape="\\"),
                Job.company.ilike(pattern, escape="\\"),
            )
        )

    # Exact match: "Pending" and "pending" are different filter values
    if status and status != STATUS_ALL:
        query = query.filter(Job.status == status)

    return query


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_jobs(
    session: Session,
    owner_id: Optional[str],
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: Any = 1,
    page_size: Any = DEFAULT_PAGE_SIZE,
) -> JobPage:
    """Filtered, paginated listing, newest first.

    Storage failures are logged and turned into an empty page.
    """
    owner_id = require_owner(owner_id)
    page = _coerce_page(page)
    page_size = _coerce_page_size(page_size)

    try:
        query = _filtered(session, owner_id, search, status)
        count = query.count()
        # OFFSET/LIMIT stay within count, so huge page numbers never reach the driver
        skip = (page - 1) * page_size
        if skip >= count:
            jobs = []
        else:
            jobs = (
                query.order_by(Job.created_at.desc(), Job.id.desc())
                .offset(skip)
                .limit(min(page_size, count - skip))
                .all()
            )
    except SQLAlchemyError as e:
        logger.error(f"Job listing failed for owner={owner_id}: {e}")
        return JobPage(jobs=[], count=0, page=1, total_pages=0)

    return JobPage(
        jobs=jobs,
        count=count,
        page=page,
        total_pages=math.ceil(count / page_size),
    )


def list_all_jobs(session: Session, owner_id: Optional[str]) -> list[Job]:
    """Every job of the owner, newest first, unpaginated (for exports)."""
    owner_id = require_owner(owner_id)
    try:
        return (
            _owned(session, owner_id)
            .order_by(Job.created_at.desc(), Job.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Job export query failed for owner={owner_id}: {e}")
        return []


def get_job(session: Session, owner_id: Optional[str], job_id: str) -> Job:
    """Fetch one job by (id, owner). Storage errors count as not found."""
    owner_id = require_owner(owner_id)
    try:
        job = _owned(session, owner_id).filter(Job.id == job_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Job lookup failed for id={job_id}: {e}")
        job = None

    if job is None:
        raise NotFoundOrUnauthorized(job_id)
    return job


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def create_job(session: Session, owner_id: Optional[str], fields: dict[str, Any]) -> Job:
    """Validate and persist a new job owned by ``owner_id``.

    Owner, id and timestamps are never taken from ``fields``.
    """
    owner_id = require_owner(owner_id)
    data = _validate(fields)

    now = utcnow()
    job = Job(
        owner_id=owner_id,
        position=data.position,
        company=data.company,
        location=data.location,
        status=data.status,
        mode=data.mode,
        created_at=now,
        updated_at=now,
    )
    try:
        session.add(job)
        session.commit()
        session.refresh(job)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Job create failed for owner={owner_id}: {e}")
        raise StorageError("Failed to create job") from e

    logger.info(f"Created job {job.id} for owner={owner_id}")
    return job


def _find_for_write(session: Session, owner_id: str, job_id: str) -> Job:
    try:
        job = _owned(session, owner_id).filter(Job.id == job_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Job lookup failed for id={job_id}: {e}")
        raise StorageError() from e
    if job is None:
        raise NotFoundOrUnauthorized(job_id)
    return job


def update_job(
    session: Session,
    owner_id: Optional[str],
    job_id: str,
    fields: dict[str, Any],
) -> Job:
    """Replace the editable fields of an owned job and refresh updated_at."""
    owner_id = require_owner(owner_id)
    data = _validate(fields)
    job = _find_for_write(session, owner_id, job_id)

    job.position = data.position
    job.company = data.company
    job.location = data.location
    job.status = data.status
    job.mode = data.mode
    job.updated_at = max(utcnow(), job.created_at)
    try:
        session.commit()
        session.refresh(job)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Job update failed for id={job_id}: {e}")
        raise StorageError("Failed to update job") from e

    logger.info(f"Updated job {job_id} for owner={owner_id}")
    return job


def delete_job(session: Session, owner_id: Optional[str], job_id: str) -> Job:
    """Hard-delete an owned job. Returns a transient copy of its prior state."""
    owner_id = require_owner(owner_id)
    job = _find_for_write(session, owner_id, job_id)
    snapshot = Job(**job.to_dict())
    try:
        session.delete(job)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Job delete failed for id={job_id}: {e}")
        raise StorageError("Failed to delete job") from e

    logger.info(f"Deleted job {job_id} for owner={owner_id}")
    return snapshot
