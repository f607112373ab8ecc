from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.common import CamelModel, Pagination


class JobSummary(CamelModel):
    id: str
    job_title: str
    location: str
    job_type: str
    is_active: bool


class ApplicationResponse(CamelModel):
    id: str
    user_id: str
    job_id: str
    provider_id: str
    status: str
    applied_date: datetime
    interview_date: Optional[datetime] = None
    interview_notes: Optional[str] = None
    offer_details: Optional[str] = None
    feedback: Optional[str] = None
    rating: Optional[int] = None
    cover_letter: Optional[str] = None
    resume_used: Optional[str] = None
    has_resume: bool
    resume_filename: Optional[str] = None
    job: Optional[JobSummary] = None
    created_at: datetime
    updated_at: datetime


class ApplicationEnvelope(BaseModel):
    message: str
    application: ApplicationResponse


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationResponse]
    pagination: Pagination


class ApplicantListResponse(BaseModel):
    applicants: list[ApplicationResponse]
    pagination: Pagination


class StatusUpdate(CamelModel):
    status: str
    interview_date: Optional[datetime] = None
    interview_notes: Optional[str] = None
    offer_details: Optional[str] = None
    feedback: Optional[str] = None
    rating: Optional[int] = None


class UserApplicationStats(CamelModel):
    total_applications: int
    applied: int
    interviews: int
    offers: int
    rejected: int
    withdrawn: int
