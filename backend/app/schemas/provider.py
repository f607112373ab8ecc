from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.common import CamelModel, Pagination


class ProviderDocumentResponse(CamelModel):
    id: str
    position: int
    filename: str
    content_type: str
    size: int


class ProviderProfileInput(CamelModel):
    company_name: Optional[str] = None
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    company_website: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    company_logo: Optional[str] = None
    description: Optional[str] = None
    employee_count: Optional[str] = None


class ProviderResponse(CamelModel):
    id: str
    user_id: str
    company_name: str
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    company_website: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    employee_count: Optional[str] = None
    company_logo: Optional[str] = None
    tax_id: Optional[str] = None
    business_license: Optional[str] = None
    verification_status: str
    verification_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    is_active: bool
    company_docs: list[ProviderDocumentResponse] = []
    created_at: datetime
    updated_at: datetime


class ProviderEnvelope(BaseModel):
    message: str
    provider: ProviderResponse


class ProviderListResponse(BaseModel):
    providers: list[ProviderResponse]
    pagination: Pagination


class VerificationDecision(CamelModel):
    status: str
    reason: Optional[str] = None


class ProviderStats(CamelModel):
    total_jobs: int
    total_applicants: int
    offers_made: int
    interviews_scheduled: int
