"""
Jobs API Endpoints
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ..auth.jwt import get_current_owner
from ..config import get_config
from ..db.database import get_db
from ..schemas import JobListResponse, JobResponse
from ..services import jobs as job_service

router = APIRouter()


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: Optional[str] = None,
    job_status: Optional[str] = Query(None, alias="jobStatus"),
    page: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """List the caller's jobs with search, status filter and pagination"""
    pagination = get_config().pagination
    page_size = min(limit or pagination.default_page_size, pagination.max_page_size)
    result = job_service.list_jobs(
        db,
        owner_id,
        search=search,
        status=job_status,
        page=page if page is not None else 1,
        page_size=page_size,
    )
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in result.jobs],
        count=result.count,
        page=result.page,
        total_pages=result.total_pages,
    )


@router.post("", response_model=JobResponse, status_code=201)
def create_job(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Create a job owned by the caller"""
    return job_service.create_job(db, owner_id, payload)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Get a single job"""
    return job_service.get_job(db, owner_id, job_id)


@router.put("/{job_id}", response_model=JobResponse)
@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Update a job"""
    return job_service.update_job(db, owner_id, job_id, payload)


@router.delete("/{job_id}", response_model=JobResponse)
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Delete a job, returning its last state"""
    return job_service.delete_job(db, owner_id, job_id)
