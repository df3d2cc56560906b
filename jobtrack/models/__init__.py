from .models import Base, Job, JOB_MODES, JOB_STATUSES, new_job_id, utcnow

__all__ = ["Base", "Job", "JOB_MODES", "JOB_STATUSES", "new_job_id", "utcnow"]
