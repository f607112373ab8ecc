"""
Application Engine - applicant/job binding, lifecycle and cross-role access

Authorization (resolve_for_viewer):
    admin              always
    owning applicant   application.user_id == viewer.id
    owning provider    viewer's Provider.id == application.provider_id
    anyone else        Forbidden

Resume resolution falls back from the application's own attachment to the
applicant's profile resume, then fails with NotFound(requiresResume=True).

Job.applications_count is changed with a single atomic UPDATE in the same
transaction as the application insert/delete, and floors at zero.
"""

import logging
from typing import Optional

from sqlalchemy import select, func, update, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal
from app.errors import Conflict, Forbidden, InvalidArgument, NotFound
from app.middleware.metrics import (
    record_application_created,
    record_application_deleted,
    record_status_update,
)
from app.models import Application, ApplicationStatus, Job, Provider, UserRole
from app.schemas.application import StatusUpdate
from app.services import notifications
from app.services.attachments import Attachment
from app.services.jobs import get_job
from app.services.providers import get_or_create_provider, get_provider_for_user
from app.services.users import get_resume

logger = logging.getLogger(__name__)

APPLICATION_STATUSES = [status.value for status in ApplicationStatus]


async def get_application(db: AsyncSession, application_id: str) -> Application:
    result = await db.execute(select(Application).where(Application.id == application_id))
    application = result.scalar_one_or_none()
    if not application:
        raise NotFound("Application not found")
    return application


async def create_application(
    db: AsyncSession,
    applicant: Principal,
    job_id: str,
    cover_letter: Optional[str] = None,
    resume: Optional[Attachment] = None,
    resume_used: Optional[str] = None,
) -> Application:
    if not job_id:
        raise InvalidArgument("Job ID required")

    job = await get_job(db, job_id)

    existing = await db.execute(
        select(Application.id).where(
            Application.user_id == applicant.id, Application.job_id == job_id
        )
    )
    if existing.scalar_one_or_none():
        raise Conflict("Already applied for this job")

    application = Application(
        user_id=applicant.id,
        job_id=job.id,
        provider_id=job.provider_id,
        status=ApplicationStatus.APPLIED.value,
        cover_letter=cover_letter,
        resume_used=resume_used,
    )
    application.job = job
    if resume is not None:
        application.resume_data = resume.data
        application.resume_content_type = resume.content_type
        application.resume_filename = resume.filename

    db.add(application)
    try:
        await db.flush()
        await db.execute(
            update(Job)
            .where(Job.id == job.id)
            .values(applications_count=Job.applications_count + 1)
            .execution_options(synchronize_session="fetch")
        )
        await db.commit()
    except IntegrityError:
        # Concurrent duplicate caught by the (user_id, job_id) unique constraint
        await db.rollback()
        raise Conflict("Already applied for this job")

    record_application_created()
    logger.info(f"Applicant {applicant.id} applied to job {job.id} ({application.id})")

    result = await db.execute(select(Provider.user_id).where(Provider.id == job.provider_id))
    provider_user_id = result.scalar_one_or_none()
    if provider_user_id:
        emitted = await notifications.notify_safely(
            db,
            provider_user_id,
            notifications.NEW_APPLICATION,
            f"New application for {job.job_title}",
            {"applicationId": application.id, "jobId": job.id},
        )
        if not emitted:
            await db.refresh(application)

    return application


async def resolve_for_viewer(db: AsyncSession, application_id: str, viewer: Principal) -> Application:
    """Load an application if ``viewer`` may see it."""
    application = await get_application(db, application_id)

    if viewer.is_admin:
        return application
    if application.user_id == viewer.id:
        return application
    if viewer.role == UserRole.PROVIDER.value:
        provider = await get_or_create_provider(db, viewer)
        if provider.id == application.provider_id:
            return application

    raise Forbidden("Unauthorized to view this application")


async def resolve_resume(db: AsyncSession, application_id: str, viewer: Principal) -> Attachment:
    application = await resolve_for_viewer(db, application_id, viewer)

    result = await db.execute(
        select(
            Application.resume_data,
            Application.resume_content_type,
            Application.resume_filename,
        ).where(Application.id == application.id)
    )
    row = result.one()
    if row.resume_data is not None:
        return Attachment(
            data=row.resume_data,
            content_type=row.resume_content_type or "application/pdf",
            filename=row.resume_filename or "resume.pdf",
        )

    profile_resume = await get_resume(db, application.user_id)
    if profile_resume is not None:
        return profile_resume

    raise NotFound(
        "Resume not available. The applicant has not uploaded a resume yet.",
        requiresResume=True,
    )


async def update_status(
    db: AsyncSession,
    application_id: str,
    acting_provider: Principal,
    data: StatusUpdate,
) -> Application:
    """Provider-only status change. Any enum value may follow any other."""
    application = await get_application(db, application_id)

    provider = await get_provider_for_user(db, acting_provider.id)
    if not provider or provider.id != application.provider_id:
        raise Forbidden("Unauthorized")

    if data.status not in APPLICATION_STATUSES:
        raise InvalidArgument("Invalid status", allowedStatuses=APPLICATION_STATUSES)

    application.status = data.status
    for field in ("interview_date", "interview_notes", "offer_details", "feedback", "rating"):
        value = getattr(data, field)
        if value is not None:
            setattr(application, field, value)

    await db.commit()
    record_status_update(data.status)
    logger.info(f"Application {application_id} moved to {data.status}")
    return application


async def delete_application(db: AsyncSession, application_id: str, acting_user: Principal) -> None:
    application = await get_application(db, application_id)

    if application.user_id != acting_user.id and not acting_user.is_admin:
        raise Forbidden("Unauthorized")

    job_id = application.job_id
    await db.delete(application)
    await db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values(
            applications_count=case(
                (Job.applications_count > 0, Job.applications_count - 1),
                else_=0,
            )
        )
        .execution_options(synchronize_session="fetch")
    )
    await db.commit()

    record_application_deleted()
    logger.info(f"Application {application_id} deleted by {acting_user.role} {acting_user.id}")


async def list_for_applicant(
    db: AsyncSession,
    applicant_id: str,
    status: Optional[str] = None,
    job_id: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Application], int]:
    query = select(Application).where(Application.user_id == applicant_id)
    count_query = select(func.count(Application.id)).where(Application.user_id == applicant_id)

    if status:
        query = query.where(Application.status == status)
        count_query = count_query.where(Application.status == status)

    if job_id:
        query = query.where(Application.job_id == job_id)
        count_query = count_query.where(Application.job_id == job_id)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Application.applied_date.desc())
    query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), total


async def user_stats(db: AsyncSession, applicant_id: str) -> dict[str, int]:
    # Applications by status - single GROUP BY query
    status_query = (
        select(Application.status, func.count(Application.id))
        .where(Application.user_id == applicant_id)
        .group_by(Application.status)
    )
    status_result = await db.execute(status_query)
    status_counts = {row[0]: row[1] for row in status_result.all()}
    for status in APPLICATION_STATUSES:
        status_counts.setdefault(status, 0)

    return {
        "total_applications": sum(status_counts.values()),
        "applied": status_counts[ApplicationStatus.APPLIED.value],
        "interviews": status_counts[ApplicationStatus.INTERVIEW.value],
        "offers": status_counts[ApplicationStatus.OFFER.value],
        "rejected": status_counts[ApplicationStatus.REJECTED.value],
        "withdrawn": status_counts[ApplicationStatus.WITHDRAWN.value],
    }
