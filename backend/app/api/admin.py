from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal, require_roles
from app.database import get_db
from app.schemas import (
    JobEnvelope,
    JobListResponse,
    JobResponse,
    PlatformStats,
    ProviderEnvelope,
    ProviderListResponse,
    ProviderResponse,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    VerificationDecision,
    build_pagination,
)
from app.services import jobs as job_service
from app.services import providers as provider_service
from app.services import users as user_service
from app.services.attachments import attachment_response

router = APIRouter()
admin_only = require_roles("admin")


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    users, total = await user_service.list_users(db, role=role, page=page, limit=limit)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        pagination=build_pagination(page, limit, total),
    )


@router.put("/users/{user_id}/status", response_model=UserEnvelope)
async def toggle_user_status(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    user = await user_service.toggle_user_status(db, user_id)
    state = "activated" if user.is_active else "deactivated"
    return UserEnvelope(message=f"User {state} successfully", user=UserResponse.model_validate(user))


@router.get("/stats", response_model=PlatformStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    stats = await user_service.platform_stats(db)
    return PlatformStats(**stats)


@router.get("/providers", response_model=ProviderListResponse)
async def list_providers(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    providers, total = await provider_service.list_providers(
        db, verification_status=status, page=page, limit=limit
    )
    return ProviderListResponse(
        providers=[ProviderResponse.model_validate(p) for p in providers],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/providers/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: str,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    provider = await provider_service.get_provider(db, provider_id)
    return ProviderResponse.model_validate(provider)


@router.put("/providers/{provider_id}/verify", response_model=ProviderEnvelope)
@router.put("/providers/{provider_id}", response_model=ProviderEnvelope)
async def verify_provider(
    provider_id: str,
    decision: VerificationDecision,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    provider = await provider_service.set_verification(
        db, provider_id, decision.status, decision.reason
    )
    return ProviderEnvelope(
        message=f"Provider {decision.status} successfully",
        provider=ProviderResponse.model_validate(provider),
    )


@router.get("/providers/{provider_id}/docs/{document_id}")
async def download_provider_document(
    provider_id: str,
    document_id: str,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    document = await provider_service.get_document(db, provider_id, document_id)
    return attachment_response(document)


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    jobs, total = await job_service.list_all_jobs(db, is_active=is_active, page=page, limit=limit)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=build_pagination(page, limit, total),
    )


@router.put("/jobs/{job_id}/deactivate", response_model=JobEnvelope)
async def deactivate_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(admin_only),
):
    job = await job_service.deactivate_job(db, job_id)
    return JobEnvelope(message="Job deactivated successfully", job=JobResponse.model_validate(job))
