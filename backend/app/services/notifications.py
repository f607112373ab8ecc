"""
Notification Ledger - append-only per-user event records

Producers:
    - Provider Registry: provider_verified, provider_rejected, provider_reverted,
      provider_resubmitted (fan-out to every admin)
    - Application Engine: new_application
    - Complaint Register: complaint_reviewed

Notifications are fire-and-forget relative to the operation that triggers
them. ``notify_safely`` logs and swallows store failures; callers get False
back and must refresh any ORM objects they still hold, because the failed
write rolls the session back.

Fan-out writes commit one row at a time. A failure part-way through leaves
the rows already written in place.
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy import select, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import Forbidden, NotFound
from app.middleware.metrics import record_notification, record_notification_failure
from app.models import Notification

logger = logging.getLogger(__name__)

PROVIDER_VERIFIED = "provider_verified"
PROVIDER_REJECTED = "provider_rejected"
PROVIDER_REVERTED = "provider_reverted"
PROVIDER_RESUBMITTED = "provider_resubmitted"
NEW_APPLICATION = "new_application"
COMPLAINT_REVIEWED = "complaint_reviewed"


async def notify(
    db: AsyncSession,
    user_id: str,
    notification_type: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=notification_type,
        message=message,
        data=data or {},
    )
    db.add(notification)
    await db.commit()
    record_notification(notification_type)
    return notification


async def notify_safely(
    db: AsyncSession,
    user_id: str,
    notification_type: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> bool:
    """Write a notification, logging instead of raising on store failure."""
    try:
        await notify(db, user_id, notification_type, message, data)
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        record_notification_failure(notification_type)
        logger.warning(f"Notification {notification_type} for user {user_id} failed: {e}")
        return False


async def notify_many(
    db: AsyncSession,
    user_ids: Iterable[str],
    notification_type: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> int:
    """Fan out one independent notification per recipient. Returns rows written."""
    written = 0
    for user_id in user_ids:
        if await notify_safely(db, user_id, notification_type, message, data):
            written += 1
    return written


async def list_notifications(
    db: AsyncSession,
    user_id: str,
    read: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Notification], int]:
    query = select(Notification).where(Notification.user_id == user_id)
    count_query = select(func.count(Notification.id)).where(Notification.user_id == user_id)

    if read is not None:
        query = query.where(Notification.read == read)
        count_query = count_query.where(Notification.read == read)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Notification.created_at.desc())
    query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), total


async def _get_owned(db: AsyncSession, notification_id: str, user_id: str) -> Notification:
    result = await db.execute(select(Notification).where(Notification.id == notification_id))
    notification = result.scalar_one_or_none()

    if not notification:
        raise NotFound("Notification not found")
    if notification.user_id != user_id:
        raise Forbidden("Unauthorized")
    return notification


async def mark_read(db: AsyncSession, notification_id: str, user_id: str) -> Notification:
    notification = await _get_owned(db, notification_id, user_id)
    notification.read = True
    await db.commit()
    return notification


async def mark_all_read(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
        .execution_options(synchronize_session="fetch")
    )
    await db.commit()
    return result.rowcount


async def delete_notification(db: AsyncSession, notification_id: str, user_id: str) -> None:
    notification = await _get_owned(db, notification_id, user_id)
    await db.delete(notification)
    await db.commit()


async def unread_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id, Notification.read.is_(False)
        )
    )
    return result.scalar() or 0
