from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal, get_current_principal, require_roles
from app.database import get_db
from app.schemas import (
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationResponse,
    MessageResponse,
    StatusUpdate,
    UserApplicationStats,
    build_pagination,
)
from app.services import applications as application_service
from app.services.attachments import PDF_CONTENT_TYPES, attachment_response, read_optional_upload

router = APIRouter()


@router.post("", response_model=ApplicationEnvelope, status_code=201)
async def apply(
    job_id: Optional[str] = Form(None, alias="jobId"),
    cover_letter: Optional[str] = Form(None, alias="coverLetter"),
    resume_used: Optional[str] = Form(None, alias="resumeUsed"),
    resume: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("applicant")),
):
    resume_file = await read_optional_upload(resume, PDF_CONTENT_TYPES)
    application = await application_service.create_application(
        db,
        principal,
        job_id,
        cover_letter=cover_letter,
        resume=resume_file,
        resume_used=resume_used,
    )
    return ApplicationEnvelope(
        message="Application submitted successfully",
        application=ApplicationResponse.model_validate(application),
    )


@router.get("", response_model=ApplicationListResponse)
async def list_my_applications(
    status: Optional[str] = Query(None),
    job_id: Optional[str] = Query(None, alias="jobId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("applicant")),
):
    applications, total = await application_service.list_for_applicant(
        db, principal.id, status=status, job_id=job_id, page=page, limit=limit
    )
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/stats/user", response_model=UserApplicationStats)
async def my_application_stats(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("applicant")),
):
    stats = await application_service.user_stats(db, principal.id)
    return UserApplicationStats(**stats)


@router.get("/{application_id}/resume")
async def download_resume(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    resume = await application_service.resolve_resume(db, application_id, principal)
    return attachment_response(resume)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    application = await application_service.resolve_for_viewer(db, application_id, principal)
    return ApplicationResponse.model_validate(application)


@router.put("/{application_id}/status", response_model=ApplicationEnvelope)
async def update_status(
    application_id: str,
    data: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("provider")),
):
    application = await application_service.update_status(db, application_id, principal, data)
    return ApplicationEnvelope(
        message="Application status updated",
        application=ApplicationResponse.model_validate(application),
    )


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    await application_service.delete_application(db, application_id, principal)
    return MessageResponse(message="Application deleted successfully")
