from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jobboard.common.pagination import PaginationEnvelope
from jobboard.models.job_post import JobStatus, JobType


def _not_in_past(value: Optional[date]) -> Optional[date]:
    if value is not None and value < date.today():
        raise ValueError("Start date cannot be in the past")
    return value


class JobPostCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=3, max_length=255)
    company: str = Field(..., min_length=2, max_length=255)
    description: str = Field(..., min_length=50, max_length=5000)
    location: str = Field(..., min_length=2, max_length=255)
    type: JobType
    status: JobStatus = JobStatus.ACTIVE
    start_date: date
    end_date: Optional[date] = None

    @field_validator("start_date")
    @classmethod
    def start_date_not_in_past(cls, value: date) -> date:
        return _not_in_past(value)

    @model_validator(mode="after")
    def end_after_start(self) -> "JobPostCreate":
        if self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class JobPostUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    company: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, min_length=50, max_length=5000)
    location: Optional[str] = Field(None, min_length=2, max_length=255)
    type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("start_date")
    @classmethod
    def start_date_not_in_past(cls, value: Optional[date]) -> Optional[date]:
        return _not_in_past(value)

    @field_validator("title", "company", "description", "location", "type", "status")
    @classmethod
    def not_null(cls, value):
        # end_date may be cleared with null, required columns may not
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class JobPostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    description: str
    location: str
    type: JobType
    status: JobStatus
    start_date: date
    end_date: Optional[date] = None
    user_id: str
    created_at: datetime
    updated_at: datetime


class JobPostFilters(BaseModel):
    """Optional predicates for listing queries; blank values count as absent."""

    type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    company: Optional[str] = None
    location: Optional[str] = None
    search: Optional[str] = None

    @field_validator("type", "status", "company", "location", "search", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class PaginatedJobPosts(BaseModel):
    data: List[JobPostResponse]
    pagination: PaginationEnvelope
    error: Optional[str] = None


class GenerateDescriptionRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    job_title: str = ""
    company: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
