"""Error taxonomy shared by the query, writer and aggregation layers.

Each operation picks its own recovery policy: listing and export fail soft,
single-record reads collapse storage failures into NotFoundOrUnauthorized,
mutations and aggregations raise.
"""
from typing import Optional


class JobTrackError(Exception):
    """Base class for all JobTrack errors."""


class Unauthenticated(JobTrackError):
    """No resolvable identity for the caller."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ValidationError(JobTrackError):
    """Input failed schema or category constraints.

    ``errors`` maps field name to a human-readable message.
    """

    def __init__(self, errors: Optional[dict[str, str]] = None,
                 message: str = "Invalid job data"):
        super().__init__(message)
        self.errors = errors or {}


class NotFoundOrUnauthorized(JobTrackError):
    """Compound (id, owner) lookup missed.

    Missing and foreign records are reported identically.
    """

    def __init__(self, job_id: Optional[str] = None):
        super().__init__("Job not found")
        self.job_id = job_id


class StorageError(JobTrackError):
    """The underlying database failed. Message never carries storage detail."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)
