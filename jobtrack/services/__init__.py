from .jobs import (
    JobPage,
    create_job,
    delete_job,
    get_job,
    list_all_jobs,
    list_jobs,
    require_owner,
    update_job,
)
from .stats import get_monthly_trend, get_status_counts
from .export import jobs_to_csv, jobs_to_xlsx

__all__ = [
    # Queries
    "JobPage",
    "list_jobs",
    "list_all_jobs",
    "get_job",
    "require_owner",
    # Writer
    "create_job",
    "update_job",
    "delete_job",
    # Aggregation
    "get_status_counts",
    "get_monthly_trend",
    # Export
    "jobs_to_csv",
    "jobs_to_xlsx",
]
