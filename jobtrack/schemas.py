"""Pydantic schemas for job input and API responses."""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator

from .models import JOB_MODES, JOB_STATUSES


class JobCreate(BaseModel):
    """Create/update payload.

    status and mode are checked case-insensitively but kept as sent;
    read-side aggregation does the normalizing.
    """
    position: str = Field(min_length=2, description="Job title")
    company: str = Field(min_length=2)
    location: str = Field(min_length=2)
    status: str = "pending"
    mode: str = "full-time"

    @field_validator("position", "company", "location")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        if value.lower() not in JOB_STATUSES:
            raise ValueError(f"must be one of: {', '.join(JOB_STATUSES)}")
        return value

    @field_validator("mode")
    @classmethod
    def _known_mode(cls, value: str) -> str:
        if value.lower() not in JOB_MODES:
            raise ValueError(f"must be one of: {', '.join(JOB_MODES)}")
        return value


class JobResponse(BaseModel):
    id: str
    position: str
    company: str
    location: str
    status: str
    mode: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    count: int
    page: int
    total_pages: int


class StatusCounts(BaseModel):
    pending: int = 0
    interview: int = 0
    declined: int = 0


class MonthlyCount(BaseModel):
    label: str  # "Oct 25"
    count: int
