"""SQLAlchemy 2.0 models for JobTrack.

One table:
- jobs: job applications, each owned by exactly one authenticated user
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


JOB_STATUSES = ("pending", "interview", "declined")
JOB_MODES = ("full-time", "part-time", "internship")


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo on read-back)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_job_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Shared declarative base for all JobTrack models."""
    pass


class Job(Base):
    """A job application record.

    status and mode are free text in storage; the category sets are only
    enforced by the write-side schema, so legacy rows may hold other values.
    """
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_job_id)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[str] = mapped_column(Text, nullable=False)
    company: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    mode: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("ix_jobs_owner", "owner_id"),
        Index("ix_jobs_owner_created", "owner_id", "created_at"),
        Index("ix_jobs_owner_status", "owner_id", "status"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "position": self.position,
            "company": self.company,
            "location": self.location,
            "status": self.status,
            "mode": self.mode,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self) -> str:
        return (
            f"<Job(id={self.id}, "
            f"owner='{self.owner_id}', "
            f"position='{self.position[:50]}', "
            f"status='{self.status}')>"
        )
