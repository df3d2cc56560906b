"""
Export Endpoints (CSV / Excel downloads)
"""

from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..auth.jwt import get_current_owner
from ..db.database import get_db
from ..services.export import jobs_to_csv, jobs_to_xlsx
from ..services.jobs import list_all_jobs
from ..services.stats import get_status_counts

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/jobs.csv")
def export_csv(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """All of the caller's jobs as CSV"""
    jobs = list_all_jobs(db, owner_id)
    return Response(
        content=jobs_to_csv(jobs),
        media_type="text/csv",
        headers=_attachment(f"jobs-{date.today().isoformat()}.csv"),
    )


@router.get("/jobs.xlsx")
def export_xlsx(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """All of the caller's jobs plus status summary as Excel"""
    jobs = list_all_jobs(db, owner_id)
    stats = get_status_counts(db, owner_id)
    return Response(
        content=jobs_to_xlsx(jobs, stats),
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment(f"jobs-{date.today().isoformat()}.xlsx"),
    )
