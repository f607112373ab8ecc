from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal, require_roles
from app.database import get_db
from app.schemas import (
    ApplicantListResponse,
    ApplicationResponse,
    ProviderEnvelope,
    ProviderProfileInput,
    ProviderResponse,
    ProviderStats,
    build_pagination,
)
from app.services import providers as provider_service
from app.services.attachments import (
    IMAGE_CONTENT_TYPES,
    PDF_CONTENT_TYPES,
    read_optional_upload,
    read_upload,
)

router = APIRouter()
provider_only = require_roles("provider")


@router.get("/profile", response_model=ProviderResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    provider = await provider_service.get_or_create_provider(db, principal)
    return ProviderResponse.model_validate(provider)


@router.post("/profile", response_model=ProviderEnvelope, status_code=201)
async def create_profile(
    data: ProviderProfileInput,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    provider = await provider_service.create_profile(db, principal, data)
    return ProviderEnvelope(
        message="Provider profile created", provider=ProviderResponse.model_validate(provider)
    )


@router.put("/profile", response_model=ProviderEnvelope)
async def update_profile(
    company_name: Optional[str] = Form(None, alias="companyName"),
    company_email: Optional[str] = Form(None, alias="companyEmail"),
    company_phone: Optional[str] = Form(None, alias="companyPhone"),
    company_website: Optional[str] = Form(None, alias="companyWebsite"),
    industry: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    employee_count: Optional[str] = Form(None, alias="employeeCount"),
    resubmit: bool = Form(False),
    company_docs: Optional[list[UploadFile]] = File(None, alias="companyDocs"),
    company_logo: Optional[UploadFile] = File(None, alias="companyLogo"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    data = ProviderProfileInput(
        company_name=company_name,
        company_email=company_email,
        company_phone=company_phone,
        company_website=company_website,
        industry=industry,
        location=location,
        description=description,
        employee_count=employee_count,
    )
    docs = [await read_upload(f, PDF_CONTENT_TYPES) for f in company_docs or [] if f.filename]
    logo = await read_optional_upload(company_logo, IMAGE_CONTENT_TYPES)

    provider = await provider_service.update_profile(
        db,
        principal,
        data,
        docs=docs,
        logo_filename=logo.filename if logo else None,
        resubmit=resubmit,
    )
    message = "Profile resubmitted for verification" if resubmit else "Profile updated successfully"
    return ProviderEnvelope(message=message, provider=ProviderResponse.model_validate(provider))


@router.post("/profile/resubmit", response_model=ProviderEnvelope)
async def resubmit_profile(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    provider = await provider_service.resubmit_for_verification(db, principal)
    return ProviderEnvelope(
        message="Profile resubmitted for verification",
        provider=ProviderResponse.model_validate(provider),
    )


@router.delete("/profile/docs/{document_id}", response_model=ProviderEnvelope)
async def remove_document(
    document_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    provider = await provider_service.remove_document(db, principal, document_id)
    return ProviderEnvelope(
        message="Document removed", provider=ProviderResponse.model_validate(provider)
    )


@router.get("/applicants", response_model=ApplicantListResponse)
async def list_applicants(
    job_id: Optional[str] = Query(None, alias="jobId"),
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    applications, total = await provider_service.list_applicants(
        db, principal, job_id=job_id, status=status, page=page, limit=limit
    )
    return ApplicantListResponse(
        applicants=[ApplicationResponse.model_validate(a) for a in applications],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/stats", response_model=ProviderStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(provider_only),
):
    stats = await provider_service.provider_stats(db, principal)
    return ProviderStats(**stats)
