"""
Provider Registry - company profiles, verification and documents

Verification State Machine:
    pending → verified      (admin decision)
    pending → rejected      (admin decision, stores rejection_reason)
    rejected → pending      (provider resubmission, notifies every admin)
    any → any               (admin may set any of the three values directly)

Side effects of an admin decision by target status:
    verified: clears rejection_reason and verification_notes, notifies provider_verified
    rejected: stores reason in rejection_reason, notifies provider_rejected
    pending:  stores reason in verification_notes, notifies provider_reverted

Provisioning:
    get_or_create_provider() is the single entry point for provider-scoped
    operations. It inserts a minimal pending Provider when the caller is a
    provider user without one. A concurrent insert for the same user loses
    on the user_id unique constraint and re-reads the winner's row.

Documents:
    Addressed by a stable UUID. Their list order is kept in ``position`` and
    renumbered on removal, so positions shift while ids never do.
"""

import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal
from app.config import get_settings
from app.errors import Conflict, Forbidden, InvalidArgument, NotFound
from app.middleware.metrics import record_provider_provisioned, record_verification_decision
from app.models import (
    Application,
    ApplicationStatus,
    Job,
    Provider,
    ProviderDocument,
    User,
    UserRole,
    VerificationStatus,
)
from app.schemas.provider import ProviderProfileInput
from app.services import notifications
from app.services.attachments import Attachment
from app.services.users import admin_ids

settings = get_settings()
logger = logging.getLogger(__name__)

VERIFICATION_STATUSES = {status.value for status in VerificationStatus}


async def get_provider(db: AsyncSession, provider_id: str) -> Provider:
    result = await db.execute(select(Provider).where(Provider.id == provider_id))
    provider = result.scalar_one_or_none()
    if not provider:
        raise NotFound("Provider not found")
    return provider


async def get_provider_for_user(db: AsyncSession, user_id: str) -> Optional[Provider]:
    result = await db.execute(select(Provider).where(Provider.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_provider(db: AsyncSession, principal: Principal) -> Provider:
    """
    Return the caller's Provider, creating a minimal pending one if absent.

    Only provider users are provisioned; anyone else without a row gets NotFound.
    """
    provider = await get_provider_for_user(db, principal.id)
    if provider:
        return provider

    if principal.role != UserRole.PROVIDER.value:
        raise NotFound("Provider profile not found")

    result = await db.execute(select(User.company_name).where(User.id == principal.id))
    company_name = result.scalar_one_or_none()

    provider = Provider(
        user_id=principal.id,
        company_name=company_name or principal.name or "Provider",
        company_email=principal.email or None,
        verification_status=VerificationStatus.PENDING.value,
        documents=[],
    )
    try:
        # Savepoint: a failed insert leaves the caller's loaded objects intact
        async with db.begin_nested():
            db.add(provider)
            await db.flush()
    except IntegrityError:
        # Lost the race against a concurrent first request for the same user
        provider = await get_provider_for_user(db, principal.id)
        if provider is None:
            raise
        return provider
    await db.commit()

    record_provider_provisioned()
    logger.info(f"Provisioned pending provider {provider.id} for user {principal.id}")
    return provider


async def create_profile(db: AsyncSession, principal: Principal, data: ProviderProfileInput) -> Provider:
    if await get_provider_for_user(db, principal.id):
        raise Conflict("Provider profile already exists")
    if not data.company_name:
        raise InvalidArgument("companyName is required")

    provider = Provider(user_id=principal.id, documents=[], **data.model_dump(exclude_none=True))
    db.add(provider)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Provider profile already exists")
    return provider


def add_documents(provider: Provider, docs: list[Attachment]) -> list[ProviderDocument]:
    """Append documents to the end of the provider's list (caller commits)."""
    if len(docs) > settings.max_company_docs:
        raise InvalidArgument(f"At most {settings.max_company_docs} documents per upload")

    added = []
    for doc in docs:
        document = ProviderDocument(
            filename=doc.filename,
            content_type=doc.content_type,
            size=doc.size,
            data=doc.data,
        )
        provider.documents.append(document)
        added.append(document)
    return added


async def update_profile(
    db: AsyncSession,
    principal: Principal,
    data: ProviderProfileInput,
    docs: Optional[list[Attachment]] = None,
    logo_filename: Optional[str] = None,
    resubmit: bool = False,
) -> Provider:
    """Partial update; creates the profile first if the provider has none."""
    provider = await get_or_create_provider(db, principal)

    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(provider, field, value)

    if docs:
        add_documents(provider, docs)
    if logo_filename:
        provider.company_logo = logo_filename

    if data.company_name:
        result = await db.execute(select(User).where(User.id == principal.id))
        user = result.scalar_one()
        user.company_name = data.company_name

    await db.commit()

    if resubmit:
        provider = await resubmit_for_verification(db, principal)
    return provider


async def remove_document(db: AsyncSession, principal: Principal, document_id: str) -> Provider:
    provider = await get_provider_for_user(db, principal.id)
    if not provider:
        raise NotFound("Provider profile not found")

    document = next((d for d in provider.documents if d.id == document_id), None)
    if document is None:
        raise NotFound("Document not found")

    provider.documents.remove(document)
    await db.commit()
    return provider


async def get_document(db: AsyncSession, provider_id: str, document_id: str) -> Attachment:
    await get_provider(db, provider_id)
    result = await db.execute(
        select(ProviderDocument.data, ProviderDocument.content_type, ProviderDocument.filename)
        .where(ProviderDocument.provider_id == provider_id, ProviderDocument.id == document_id)
    )
    row = result.one_or_none()
    if row is None or row.data is None:
        raise NotFound("Document not found")
    return Attachment(
        data=row.data,
        content_type=row.content_type or "application/pdf",
        filename=row.filename or "document.pdf",
    )


async def set_verification(
    db: AsyncSession,
    provider_id: str,
    status: str,
    reason: Optional[str] = None,
) -> Provider:
    """Admin verification decision."""
    if status not in VERIFICATION_STATUSES:
        raise InvalidArgument("Invalid status")

    provider = await get_provider(db, provider_id)
    provider.verification_status = status

    if status == VerificationStatus.VERIFIED.value:
        provider.rejection_reason = None
        provider.verification_notes = None
    elif status == VerificationStatus.REJECTED.value and reason:
        provider.rejection_reason = reason
    elif status == VerificationStatus.PENDING.value and reason:
        provider.verification_notes = reason

    await db.commit()
    record_verification_decision(status)
    logger.info(f"Provider {provider_id} set to {status}")

    user_id = provider.user_id
    data = {"providerId": provider.id}
    if status == VerificationStatus.VERIFIED.value:
        emitted = await notifications.notify_safely(
            db, user_id, notifications.PROVIDER_VERIFIED,
            "Your provider account has been verified!", data,
        )
    elif status == VerificationStatus.REJECTED.value:
        emitted = await notifications.notify_safely(
            db, user_id, notifications.PROVIDER_REJECTED,
            f"Your provider account was rejected. Reason: {reason or 'Not specified'}",
            {**data, "reason": reason},
        )
    else:
        emitted = await notifications.notify_safely(
            db, user_id, notifications.PROVIDER_REVERTED,
            f"Your provider account status was changed to pending. Reason: {reason or 'Not specified'}",
            {**data, "reason": reason},
        )

    if not emitted:
        await db.refresh(provider)
    return provider


async def resubmit_for_verification(db: AsyncSession, principal: Principal) -> Provider:
    """Move the caller's provider back to pending and notify every admin."""
    provider = await get_provider_for_user(db, principal.id)
    if not provider:
        raise NotFound("Provider profile not found")

    provider.verification_status = VerificationStatus.PENDING.value
    await db.commit()
    logger.info(f"Provider {provider.id} resubmitted for verification")

    provider_id = provider.id
    message = f"Provider {provider.company_name or 'Unnamed'} has resubmitted for verification"
    recipients = await admin_ids(db)
    written = await notifications.notify_many(
        db, recipients, notifications.PROVIDER_RESUBMITTED, message, {"providerId": provider_id},
    )

    if written < len(recipients):
        await db.refresh(provider)
    return provider


def assert_can_post_jobs(provider: Provider) -> None:
    if provider.verification_status != VerificationStatus.VERIFIED.value:
        raise Forbidden(
            "Your account must be verified by admin before posting jobs",
            verificationStatus=provider.verification_status,
        )


async def list_applicants(
    db: AsyncSession,
    principal: Principal,
    job_id: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Application], int]:
    provider = await get_or_create_provider(db, principal)

    query = select(Application).where(Application.provider_id == provider.id)
    count_query = select(func.count(Application.id)).where(Application.provider_id == provider.id)

    if job_id:
        query = query.where(Application.job_id == job_id)
        count_query = count_query.where(Application.job_id == job_id)

    if status:
        query = query.where(Application.status == status)
        count_query = count_query.where(Application.status == status)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Application.applied_date.desc())
    query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), total


async def provider_stats(db: AsyncSession, principal: Principal) -> dict[str, int]:
    provider = await get_or_create_provider(db, principal)

    jobs_result = await db.execute(
        select(func.count(Job.id)).where(Job.provider_id == provider.id)
    )

    status_query = (
        select(Application.status, func.count(Application.id))
        .where(Application.provider_id == provider.id)
        .group_by(Application.status)
    )
    status_result = await db.execute(status_query)
    status_counts = {row[0]: row[1] for row in status_result.all()}

    return {
        "total_jobs": jobs_result.scalar() or 0,
        "total_applicants": sum(status_counts.values()),
        "offers_made": status_counts.get(ApplicationStatus.OFFER.value, 0),
        "interviews_scheduled": status_counts.get(ApplicationStatus.INTERVIEW.value, 0),
    }


async def list_providers(
    db: AsyncSession,
    verification_status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Provider], int]:
    query = select(Provider)
    count_query = select(func.count(Provider.id))

    if verification_status:
        query = query.where(Provider.verification_status == verification_status)
        count_query = count_query.where(Provider.verification_status == verification_status)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Provider.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total
