"""
Tests for the Complaint Register

Tests cover:
- Filing with a loose (type, id) target
- targetType validation
- Admin review and the filer's notification
"""

import pytest
from sqlalchemy import select

from conftest import principal_for
from app.errors import InvalidArgument, NotFound
from app.models import Notification
from app.schemas import ComplaintCreate, ComplaintReview
from app.services import complaints


class TestFileComplaint:
    """Any authenticated user may file."""

    @pytest.mark.asyncio
    async def test_target_not_checked(self, db, make_user):
        user = await make_user()

        complaint = await complaints.file_complaint(
            db, principal_for(user),
            ComplaintCreate(target_type="job", target_id="does-not-exist", message="Spam listing"),
        )

        assert complaint.status == "open"
        assert complaint.target_id == "does-not-exist"

    @pytest.mark.asyncio
    async def test_invalid_target_type(self, db, make_user):
        user = await make_user()

        with pytest.raises(InvalidArgument) as exc_info:
            await complaints.file_complaint(
                db, principal_for(user), ComplaintCreate(target_type="planet", message="?")
            )

        assert "job" in exc_info.value.extra["allowedTargetTypes"]

    @pytest.mark.asyncio
    async def test_blank_message(self, db, make_user):
        user = await make_user()

        with pytest.raises(InvalidArgument):
            await complaints.file_complaint(
                db, principal_for(user), ComplaintCreate(target_type="job", message="")
            )

    @pytest.mark.asyncio
    async def test_user_list_only_own(self, db, make_user):
        user = await make_user()
        other = await make_user()
        await complaints.file_complaint(db, principal_for(user), ComplaintCreate(target_type="user", message="a"))
        await complaints.file_complaint(db, principal_for(other), ComplaintCreate(target_type="user", message="b"))

        mine, total = await complaints.list_user_complaints(db, user.id)
        everything, all_total = await complaints.list_all_complaints(db)

        assert total == 1
        assert mine[0].message == "a"
        assert all_total == 2


class TestReviewComplaint:
    """Admin review."""

    @pytest.mark.asyncio
    async def test_review_sets_status_and_notifies_filer(self, db, make_user):
        user = await make_user()
        complaint = await complaints.file_complaint(
            db, principal_for(user), ComplaintCreate(target_type="provider", target_id="p1", message="Scam")
        )

        result = await complaints.review_complaint(
            db, complaint.id, ComplaintReview(status="resolved", admin_response="Removed")
        )

        assert result.status == "resolved"
        assert result.admin_response == "Removed"
        sent = await db.execute(
            select(Notification).where(
                Notification.user_id == user.id, Notification.type == "complaint_reviewed"
            )
        )
        assert len(sent.scalars().all()) == 1

    @pytest.mark.asyncio
    async def test_invalid_status(self, db, make_user):
        user = await make_user()
        complaint = await complaints.file_complaint(
            db, principal_for(user), ComplaintCreate(target_type="job", message="x")
        )

        with pytest.raises(InvalidArgument):
            await complaints.review_complaint(db, complaint.id, ComplaintReview(status="closed"))

    @pytest.mark.asyncio
    async def test_missing_complaint(self, db):
        with pytest.raises(NotFound):
            await complaints.review_complaint(db, "missing", ComplaintReview(status="resolved"))
