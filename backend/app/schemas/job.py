from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.models import JobType
from app.schemas.common import CamelModel, Pagination


class SalaryRange(BaseModel):
    min: Optional[int] = None
    max: Optional[int] = None
    currency: str = "USD"


class JobBase(CamelModel):
    job_title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    job_type: JobType
    salary: Optional[SalaryRange] = None
    experience: Optional[str] = None
    skills: list[str] = []
    qualification: Optional[str] = None
    deadline: Optional[datetime] = None


class JobCreate(JobBase):
    pass


class JobUpdate(CamelModel):
    job_title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    salary: Optional[SalaryRange] = None
    experience: Optional[str] = None
    skills: Optional[list[str]] = None
    qualification: Optional[str] = None
    deadline: Optional[datetime] = None


class JobResponse(JobBase):
    id: str
    provider_id: str
    salary: SalaryRange
    applications_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class JobEnvelope(BaseModel):
    message: str
    job: JobResponse


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    pagination: Pagination
