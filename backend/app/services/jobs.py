"""
Job Catalog - postings owned by a single provider

Creation is gated on the owning provider being verified. Update and delete
require the caller's provider to own the job; delete only clears is_active.
"""

import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal
from app.errors import Forbidden, NotFound
from app.models import Job
from app.schemas.job import JobCreate, JobUpdate
from app.services.providers import assert_can_post_jobs, get_or_create_provider

logger = logging.getLogger(__name__)


def _apply_salary(job: Job, salary) -> None:
    job.salary_min = salary.min
    job.salary_max = salary.max
    job.salary_currency = salary.currency


async def create_job(db: AsyncSession, principal: Principal, data: JobCreate) -> Job:
    provider = await get_or_create_provider(db, principal)
    assert_can_post_jobs(provider)

    job = Job(
        provider_id=provider.id,
        job_title=data.job_title,
        description=data.description,
        location=data.location,
        job_type=data.job_type.value,
        experience=data.experience,
        skills=data.skills,
        qualification=data.qualification,
        deadline=data.deadline,
        applications_count=0,
        is_active=True,
    )
    if data.salary:
        _apply_salary(job, data.salary)

    db.add(job)
    await db.commit()
    logger.info(f"Provider {provider.id} posted job {job.id}")
    return job


async def get_job(db: AsyncSession, job_id: str) -> Job:
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()
    if not job:
        raise NotFound("Job not found")
    return job


async def list_jobs(
    db: AsyncSession,
    job_type: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Job], int]:
    """Public listing: active jobs only."""
    query = select(Job).where(Job.is_active.is_(True))
    count_query = select(func.count(Job.id)).where(Job.is_active.is_(True))

    if job_type:
        query = query.where(Job.job_type == job_type)
        count_query = count_query.where(Job.job_type == job_type)

    if location:
        location_filter = Job.location.ilike(f"%{location}%")
        query = query.where(location_filter)
        count_query = count_query.where(location_filter)

    if search:
        search_filter = Job.job_title.ilike(f"%{search}%") | Job.description.ilike(f"%{search}%")
        query = query.where(search_filter)
        count_query = count_query.where(search_filter)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Job.created_at.desc())
    query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), total


async def list_provider_jobs(
    db: AsyncSession,
    principal: Principal,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Job], int]:
    provider = await get_or_create_provider(db, principal)

    total_result = await db.execute(
        select(func.count(Job.id)).where(Job.provider_id == provider.id)
    )
    total = total_result.scalar() or 0

    query = (
        select(Job)
        .where(Job.provider_id == provider.id)
        .order_by(Job.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def _get_owned_job(db: AsyncSession, principal: Principal, job_id: str) -> Job:
    job = await get_job(db, job_id)
    provider = await get_or_create_provider(db, principal)
    if provider.id != job.provider_id:
        raise Forbidden("Unauthorized")
    return job


async def update_job(db: AsyncSession, principal: Principal, job_id: str, data: JobUpdate) -> Job:
    job = await _get_owned_job(db, principal, job_id)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    salary = update_data.pop("salary", None)
    if "job_type" in update_data:
        update_data["job_type"] = data.job_type.value

    for field, value in update_data.items():
        setattr(job, field, value)
    if salary is not None:
        _apply_salary(job, data.salary)

    await db.commit()
    return job


async def delete_job(db: AsyncSession, principal: Principal, job_id: str) -> Job:
    job = await _get_owned_job(db, principal, job_id)
    job.is_active = False
    await db.commit()
    logger.info(f"Job {job_id} deactivated by its provider")
    return job


# ==================== Admin ====================

async def list_all_jobs(
    db: AsyncSession,
    is_active: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Job], int]:
    query = select(Job)
    count_query = select(func.count(Job.id))

    if is_active is not None:
        query = query.where(Job.is_active == is_active)
        count_query = count_query.where(Job.is_active == is_active)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Job.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def deactivate_job(db: AsyncSession, job_id: str) -> Job:
    job = await get_job(db, job_id)
    job.is_active = False
    await db.commit()
    logger.info(f"Job {job_id} deactivated by admin")
    return job
