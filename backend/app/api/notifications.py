from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal, get_current_principal
from app.database import get_db
from app.schemas import (
    MessageResponse,
    NotificationEnvelope,
    NotificationListResponse,
    NotificationResponse,
    UnreadCount,
    build_pagination,
)
from app.services import notifications as notification_service

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    read: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    items, total = await notification_service.list_notifications(
        db, principal.id, read=read, page=page, limit=limit
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/unread/count", response_model=UnreadCount)
async def unread_count(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    count = await notification_service.unread_count(db, principal.id)
    return UnreadCount(unread_count=count)


@router.put("/read/all", response_model=MessageResponse)
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    updated = await notification_service.mark_all_read(db, principal.id)
    return MessageResponse(message=f"{updated} notifications marked as read")


@router.put("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_read(
    notification_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    notification = await notification_service.mark_read(db, notification_id, principal.id)
    return NotificationEnvelope(
        message="Notification marked as read",
        notification=NotificationResponse.model_validate(notification),
    )


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    await notification_service.delete_notification(db, notification_id, principal.id)
    return MessageResponse(message="Notification deleted")
