from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Principal, get_current_principal, require_roles
from app.database import get_db
from app.schemas import (
    ComplaintCreate,
    ComplaintEnvelope,
    ComplaintListResponse,
    ComplaintResponse,
    ComplaintReview,
    build_pagination,
)
from app.services import complaints as complaint_service

router = APIRouter()


@router.post("", response_model=ComplaintEnvelope, status_code=201)
async def file_complaint(
    data: ComplaintCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    complaint = await complaint_service.file_complaint(db, principal, data)
    return ComplaintEnvelope(
        message="Complaint submitted successfully",
        complaint=ComplaintResponse.model_validate(complaint),
    )


@router.get("", response_model=ComplaintListResponse)
@router.get("/my-complaints", response_model=ComplaintListResponse)
async def my_complaints(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    complaints, total = await complaint_service.list_user_complaints(
        db, principal.id, status=status, page=page, limit=limit
    )
    return ComplaintListResponse(
        complaints=[ComplaintResponse.model_validate(c) for c in complaints],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/admin/all", response_model=ComplaintListResponse)
async def all_complaints(
    status: Optional[str] = Query(None),
    target_type: Optional[str] = Query(None, alias="targetType"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(require_roles("admin")),
):
    complaints, total = await complaint_service.list_all_complaints(
        db, status=status, target_type=target_type, page=page, limit=limit
    )
    return ComplaintListResponse(
        complaints=[ComplaintResponse.model_validate(c) for c in complaints],
        pagination=build_pagination(page, limit, total),
    )


@router.put("/admin/{complaint_id}/review", response_model=ComplaintEnvelope)
async def review_complaint(
    complaint_id: str,
    data: ComplaintReview,
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(require_roles("admin")),
):
    complaint = await complaint_service.review_complaint(db, complaint_id, data)
    return ComplaintEnvelope(
        message="Complaint reviewed", complaint=ComplaintResponse.model_validate(complaint)
    )
