"""
Identity store - registration, login, self-service profile and admin user moderation.

Registration payloads are a tagged union on ``role``; the variant is
validated before any entity is built. Providers get their Provider row
(status ``pending``) in the same transaction as the user.
"""

import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import hash_password, verify_password
from app.errors import Conflict, Forbidden, InvalidArgument, NotFound, Unauthenticated
from app.models import Application, ApplicationStatus, Job, Provider, ProviderDocument, User, UserRole
from app.models.mixins import utcnow
from app.schemas.auth import ProfileUpdate, ProviderRegistration, RegistrationRequest
from app.services.attachments import Attachment

logger = logging.getLogger(__name__)

registration_adapter = TypeAdapter(RegistrationRequest)


def parse_registration(payload: dict[str, Any]):
    """Validate a raw registration payload into its role-specific variant."""
    try:
        return registration_adapter.validate_python(payload)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidArgument(", ".join(err["msg"] for err in errors), errors=errors)


async def get_user(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def register(
    db: AsyncSession,
    payload,
    resume: Optional[Attachment] = None,
    company_docs: Optional[list[Attachment]] = None,
) -> User:
    email = payload.email.lower()
    if await get_user_by_email(db, email):
        raise Conflict("User already exists")

    user = User(
        role=payload.role,
        name=payload.name,
        email=email,
        password_hash=hash_password(payload.password),
        phone=payload.phone,
    )

    if isinstance(payload, ProviderRegistration):
        user.company_name = payload.company_name
        db.add(user)
        await db.flush()

        provider = Provider(
            user_id=user.id,
            company_name=payload.company_name or payload.name,
            company_email=payload.company_email,
            company_phone=payload.company_phone,
            company_website=payload.company_website,
            industry=payload.company_type,
            location=payload.company_location,
            description=payload.company_description,
            employee_count=payload.company_size,
            tax_id=payload.tax_id,
            business_license=payload.business_license,
            documents=[],
        )
        for doc in company_docs or []:
            provider.documents.append(
                ProviderDocument(
                    filename=doc.filename,
                    content_type=doc.content_type,
                    size=doc.size,
                    data=doc.data,
                )
            )
        db.add(provider)
    else:
        user.location = payload.location
        user.skills = payload.skills
        user.experience = payload.experience
        if resume is not None:
            _set_resume(user, resume)
        db.add(user)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("User already exists")

    logger.info(f"Registered {user.role} {user.id}")
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    if not email or not password:
        raise InvalidArgument("Email and password required")

    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    if not user.is_active:
        raise Forbidden("Account is deactivated")

    user.last_login = utcnow()
    await db.commit()
    return user


def _set_resume(user: User, resume: Attachment) -> None:
    user.resume_data = resume.data
    user.resume_content_type = resume.content_type
    user.resume_filename = resume.filename


def _set_profile_image(user: User, image: Attachment) -> None:
    user.profile_image_data = image.data
    user.profile_image_content_type = image.content_type
    user.profile_image_filename = image.filename


async def update_profile(
    db: AsyncSession,
    user_id: str,
    update: ProfileUpdate,
    resume: Optional[Attachment] = None,
    profile_image: Optional[Attachment] = None,
) -> User:
    user = await get_user(db, user_id)

    for field, value in update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, field, value)

    if resume is not None:
        _set_resume(user, resume)
    if profile_image is not None:
        _set_profile_image(user, profile_image)

    await db.commit()
    return user


async def set_profile_image(db: AsyncSession, user_id: str, image: Attachment) -> User:
    user = await get_user(db, user_id)
    _set_profile_image(user, image)
    await db.commit()
    return user


async def get_resume(db: AsyncSession, user_id: str) -> Optional[Attachment]:
    """Profile-level resume, or None when the user has not uploaded one."""
    result = await db.execute(
        select(User.resume_data, User.resume_content_type, User.resume_filename)
        .where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None or row.resume_data is None:
        return None
    return Attachment(
        data=row.resume_data,
        content_type=row.resume_content_type or "application/pdf",
        filename=row.resume_filename or "resume.pdf",
    )


async def get_profile_image(db: AsyncSession, user_id: str) -> Optional[Attachment]:
    result = await db.execute(
        select(
            User.profile_image_data,
            User.profile_image_content_type,
            User.profile_image_filename,
        ).where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None or row.profile_image_data is None:
        return None
    return Attachment(
        data=row.profile_image_data,
        content_type=row.profile_image_content_type or "application/octet-stream",
        filename=row.profile_image_filename or "profile-image",
    )


# ==================== Admin ====================

async def list_users(
    db: AsyncSession,
    role: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[User], int]:
    query = select(User)
    count_query = select(func.count(User.id))

    if role:
        query = query.where(User.role == role)
        count_query = count_query.where(User.role == role)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def toggle_user_status(db: AsyncSession, user_id: str) -> User:
    user = await get_user(db, user_id)
    user.is_active = not user.is_active
    await db.commit()
    logger.info(f"User {user_id} {'activated' if user.is_active else 'deactivated'}")
    return user


async def admin_ids(db: AsyncSession) -> list[str]:
    result = await db.execute(select(User.id).where(User.role == UserRole.ADMIN.value))
    return list(result.scalars().all())


async def platform_stats(db: AsyncSession) -> dict[str, int]:
    role_result = await db.execute(select(User.role, func.count(User.id)).group_by(User.role))
    role_counts = {row[0]: row[1] for row in role_result.all()}

    jobs_result = await db.execute(select(func.count(Job.id)).where(Job.is_active.is_(True)))
    applications_result = await db.execute(select(func.count(Application.id)))
    offers_result = await db.execute(
        select(func.count(Application.id)).where(
            Application.status == ApplicationStatus.OFFER.value
        )
    )

    return {
        "total_users": sum(role_counts.values()),
        "total_applicants": role_counts.get(UserRole.APPLICANT.value, 0),
        "total_providers": role_counts.get(UserRole.PROVIDER.value, 0),
        "total_jobs": jobs_result.scalar() or 0,
        "total_applications": applications_result.scalar() or 0,
        "total_offers": offers_result.scalar() or 0,
    }
