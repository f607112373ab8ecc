from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.database import get_db
from app.schemas import JobCreate, JobEnvelope, JobListResponse, JobResponse, JobUpdate, build_pagination
from app.auth import Principal, require_roles
from app.services import jobs as job_service

router = APIRouter()


@router.get("", response_model=JobListResponse)
async def list_jobs(
    job_type: Optional[str] = Query(None, alias="jobType"),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    jobs, total = await job_service.list_jobs(
        db, job_type=job_type, location=location, search=search, page=page, limit=limit
    )
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=build_pagination(page, limit, total),
    )


@router.post("", response_model=JobEnvelope, status_code=201)
async def create_job(
    data: JobCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("provider")),
):
    job = await job_service.create_job(db, principal, data)
    return JobEnvelope(message="Job posted successfully", job=JobResponse.model_validate(job))


# Declared before /{job_id} so "provider" is not captured as an id
@router.get("/provider/jobs", response_model=JobListResponse)
async def list_provider_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("provider")),
):
    jobs, total = await job_service.list_provider_jobs(db, principal, page=page, limit=limit)
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, db: AsyncSession = Depends(get_db)):
    job = await job_service.get_job(db, job_id)
    return JobResponse.model_validate(job)


@router.put("/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: str,
    data: JobUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("provider")),
):
    job = await job_service.update_job(db, principal, job_id, data)
    return JobEnvelope(message="Job updated successfully", job=JobResponse.model_validate(job))


@router.delete("/{job_id}", response_model=JobEnvelope)
async def delete_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_roles("provider")),
):
    job = await job_service.delete_job(db, principal, job_id)
    return JobEnvelope(message="Job deleted successfully", job=JobResponse.model_validate(job))
