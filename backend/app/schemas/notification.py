from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.schemas.common import CamelModel, Pagination


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    type: str
    message: str
    data: dict[str, Any] = {}
    read: bool
    created_at: datetime


class NotificationEnvelope(BaseModel):
    message: str
    notification: NotificationResponse


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    pagination: Pagination


class UnreadCount(CamelModel):
    unread_count: int
