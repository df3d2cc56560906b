"""CSV and Excel renderings of an owner's job list."""
import csv
import io
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font

from ..models import JOB_STATUSES, Job

EXPORT_COLUMNS = ["Position", "Company", "Location", "Status", "Mode", "Date Applied"]


def job_to_row(job: Job) -> list:
    return [
        job.position,
        job.company,
        job.location,
        job.status,
        job.mode,
        job.created_at.strftime("%Y-%m-%d") if job.created_at else "",
    ]


def jobs_to_csv(jobs: Iterable[Job]) -> str:
    """Render jobs as CSV text with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(EXPORT_COLUMNS)
    for job in jobs:
        writer.writerow(job_to_row(job))
    return buf.getvalue()


def jobs_to_xlsx(jobs: Iterable[Job], stats: dict[str, int]) -> bytes:
    """Render jobs plus a status summary as an .xlsx workbook.

    Sheets: "Jobs" (one row per job) and "Summary" (status counts + total).
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Jobs"
    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for job in jobs:
        ws.append(job_to_row(job))

    summary = wb.create_sheet("Summary")
    summary.append(["Status", "Count"])
    for cell in summary[1]:
        cell.font = Font(bold=True)
    for status in JOB_STATUSES:
        summary.append([status.capitalize(), stats.get(status, 0)])
    summary.append(["Total", sum(stats.get(s, 0) for s in JOB_STATUSES)])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
