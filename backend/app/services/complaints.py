"""
Complaint Register - user-filed complaints with admin review

Targets are a loose (type, id) reference with no referential check.
Review sets one of the four statuses plus an optional response, and tells
the filer about it (best effort).
"""

import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal
from app.errors import InvalidArgument, NotFound
from app.models import Complaint, ComplaintStatus, ComplaintTargetType
from app.schemas.complaint import ComplaintCreate, ComplaintReview
from app.services import notifications

logger = logging.getLogger(__name__)

TARGET_TYPES = {target.value for target in ComplaintTargetType}
COMPLAINT_STATUSES = {status.value for status in ComplaintStatus}


async def file_complaint(db: AsyncSession, principal: Principal, data: ComplaintCreate) -> Complaint:
    if not data.message or not data.target_type:
        raise InvalidArgument("Message and targetType required")
    if data.target_type not in TARGET_TYPES:
        raise InvalidArgument("Invalid targetType", allowedTargetTypes=sorted(TARGET_TYPES))

    complaint = Complaint(
        user_id=principal.id,
        target_type=data.target_type,
        target_id=data.target_id,
        message=data.message,
        status=ComplaintStatus.OPEN.value,
    )
    db.add(complaint)
    await db.commit()
    logger.info(f"Complaint {complaint.id} filed against {data.target_type} {data.target_id}")
    return complaint


async def _list(
    db: AsyncSession,
    user_id: Optional[str],
    status: Optional[str],
    target_type: Optional[str],
    page: int,
    limit: int,
) -> tuple[list[Complaint], int]:
    query = select(Complaint)
    count_query = select(func.count(Complaint.id))

    if user_id:
        query = query.where(Complaint.user_id == user_id)
        count_query = count_query.where(Complaint.user_id == user_id)

    if status:
        query = query.where(Complaint.status == status)
        count_query = count_query.where(Complaint.status == status)

    if target_type:
        query = query.where(Complaint.target_type == target_type)
        count_query = count_query.where(Complaint.target_type == target_type)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Complaint.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def list_user_complaints(
    db: AsyncSession,
    user_id: str,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Complaint], int]:
    return await _list(db, user_id, status, None, page, limit)


async def list_all_complaints(
    db: AsyncSession,
    status: Optional[str] = None,
    target_type: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Complaint], int]:
    return await _list(db, None, status, target_type, page, limit)


async def review_complaint(db: AsyncSession, complaint_id: str, data: ComplaintReview) -> Complaint:
    if data.status not in COMPLAINT_STATUSES:
        raise InvalidArgument("Invalid status")

    result = await db.execute(select(Complaint).where(Complaint.id == complaint_id))
    complaint = result.scalar_one_or_none()
    if not complaint:
        raise NotFound("Complaint not found")

    complaint.status = data.status
    complaint.admin_response = data.admin_response
    await db.commit()
    logger.info(f"Complaint {complaint_id} reviewed: {data.status}")

    emitted = await notifications.notify_safely(
        db,
        complaint.user_id,
        notifications.COMPLAINT_REVIEWED,
        f"Your complaint was marked {data.status.replace('_', ' ')}",
        {"complaintId": complaint.id, "status": data.status},
    )
    if not emitted:
        await db.refresh(complaint)
    return complaint
