from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.common import CamelModel, Pagination


class ComplaintCreate(CamelModel):
    target_type: str
    target_id: Optional[str] = None
    message: str


class ComplaintReview(CamelModel):
    status: str
    admin_response: Optional[str] = None


class ComplaintResponse(CamelModel):
    id: str
    user_id: str
    target_type: str
    target_id: Optional[str] = None
    message: str
    status: str
    admin_response: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ComplaintEnvelope(BaseModel):
    message: str
    complaint: ComplaintResponse


class ComplaintListResponse(BaseModel):
    complaints: list[ComplaintResponse]
    pagination: Pagination
