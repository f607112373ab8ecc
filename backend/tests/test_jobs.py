"""
Tests for the Job Catalog

Tests cover:
- Verification gate on create
- Ownership checks on update/delete
- Soft delete keeps the row and its counter
- Public listing filters and pagination
"""

import pytest
from unittest.mock import patch
from sqlalchemy import select

from conftest import principal_for
from app.errors import Forbidden, NotFound
from app.models import Job, JobType, UserRole
from app.schemas import JobCreate, JobUpdate, SalaryRange
from app.services import jobs, providers


def job_payload(**overrides) -> JobCreate:
    data = {
        "job_title": "Data Engineer",
        "description": "Pipelines and warehouses",
        "location": "Berlin",
        "job_type": JobType.FULL_TIME,
        "salary": SalaryRange(min=60000, max=80000, currency="EUR"),
        "skills": ["python", "sql"],
    }
    data.update(overrides)
    return JobCreate(**data)


class TestCreateJob:
    """Posting is gated on provider verification."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["pending", "rejected"])
    async def test_unverified_provider_forbidden(self, db, make_provider, status):
        user, _ = await make_provider(status=status)

        with pytest.raises(Forbidden) as exc_info:
            await jobs.create_job(db, principal_for(user), job_payload())

        assert exc_info.value.extra["verificationStatus"] == status

    @pytest.mark.asyncio
    async def test_retry_after_verification_succeeds(self, db, make_provider):
        user, provider = await make_provider()
        with pytest.raises(Forbidden):
            await jobs.create_job(db, principal_for(user), job_payload())

        await providers.set_verification(db, provider.id, "verified")
        job = await jobs.create_job(db, principal_for(user), job_payload())

        assert job.is_active is True
        assert job.applications_count == 0
        assert job.provider_id == provider.id
        assert job.salary == {"min": 60000, "max": 80000, "currency": "EUR"}

    @pytest.mark.asyncio
    async def test_provisioned_provider_is_pending(self, db, make_user):
        user = await make_user(UserRole.PROVIDER.value)

        with pytest.raises(Forbidden) as exc_info:
            await jobs.create_job(db, principal_for(user), job_payload())

        assert exc_info.value.extra["verificationStatus"] == "pending"


class TestOwnership:
    """Update and delete require the owning provider."""

    @pytest.mark.asyncio
    async def test_owner_partial_update(self, db, make_provider, make_job):
        user, provider = await make_provider(status="verified")
        job = await make_job(provider, location="Remote")

        result = await jobs.update_job(
            db, principal_for(user), job.id, JobUpdate(job_title="Staff Engineer")
        )

        assert result.job_title == "Staff Engineer"
        assert result.location == "Remote"

    @pytest.mark.asyncio
    async def test_owner_update_after_lost_provisioning_race(self, db, make_provider, make_job):
        user, provider = await make_provider(status="verified")
        job = await make_job(provider, location="Remote")
        real_lookup = providers.get_provider_for_user
        calls = []

        async def stale_first_lookup(session, user_id):
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return await real_lookup(session, user_id)

        with patch("app.services.providers.get_provider_for_user", new=stale_first_lookup):
            result = await jobs.update_job(
                db, principal_for(user), job.id, JobUpdate(job_title="Staff Engineer")
            )

        assert result.job_title == "Staff Engineer"
        assert result.location == "Remote"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_owner_delete_after_lost_provisioning_race(self, db, make_provider, make_job):
        user, provider = await make_provider(status="verified")
        job = await make_job(provider)
        real_lookup = providers.get_provider_for_user
        calls = []

        async def stale_first_lookup(session, user_id):
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return await real_lookup(session, user_id)

        with patch("app.services.providers.get_provider_for_user", new=stale_first_lookup):
            result = await jobs.delete_job(db, principal_for(user), job.id)

        assert result.is_active is False

    @pytest.mark.asyncio
    async def test_other_provider_cannot_update(self, db, make_provider, make_job):
        _, owner = await make_provider(status="verified")
        other_user, _ = await make_provider(status="verified")
        job = await make_job(owner)

        with pytest.raises(Forbidden):
            await jobs.update_job(db, principal_for(other_user), job.id, JobUpdate(job_title="X"))

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, db, make_provider, make_job):
        user, provider = await make_provider(status="verified")
        job = await make_job(provider, applications_count=3)

        await jobs.delete_job(db, principal_for(user), job.id)

        result = await db.execute(select(Job).where(Job.id == job.id))
        stored = result.scalar_one()
        assert stored.is_active is False
        assert stored.applications_count == 3

    @pytest.mark.asyncio
    async def test_other_provider_cannot_delete(self, db, make_provider, make_job):
        _, owner = await make_provider(status="verified")
        other_user, _ = await make_provider(status="verified")
        job = await make_job(owner)

        with pytest.raises(Forbidden):
            await jobs.delete_job(db, principal_for(other_user), job.id)

    @pytest.mark.asyncio
    async def test_missing_job(self, db, make_provider):
        user, _ = await make_provider(status="verified")

        with pytest.raises(NotFound):
            await jobs.update_job(db, principal_for(user), "missing", JobUpdate(job_title="X"))


class TestListJobs:
    """Public listing of active jobs."""

    @pytest.mark.asyncio
    async def test_only_active_jobs(self, db, make_provider, make_job):
        _, provider = await make_provider(status="verified")
        active = await make_job(provider)
        await make_job(provider, is_active=False)

        items, total = await jobs.list_jobs(db)

        assert total == 1
        assert [j.id for j in items] == [active.id]

    @pytest.mark.asyncio
    async def test_filters(self, db, make_provider, make_job):
        _, provider = await make_provider(status="verified")
        await make_job(provider, job_title="Python Developer", location="Berlin, DE", job_type="Full-time")
        await make_job(provider, job_title="Designer", location="Paris", job_type="Contract")
        await make_job(
            provider, job_title="Intern", description="Learn python", location="Berlin", job_type="Internship"
        )

        _, by_type = await jobs.list_jobs(db, job_type="Contract")
        _, by_location = await jobs.list_jobs(db, location="berlin")
        search_items, by_search = await jobs.list_jobs(db, search="python")

        assert by_type == 1
        assert by_location == 2
        assert by_search == 2
        assert {j.job_title for j in search_items} == {"Python Developer", "Intern"}

    @pytest.mark.asyncio
    async def test_pagination(self, db, make_provider, make_job):
        _, provider = await make_provider(status="verified")
        for i in range(5):
            await make_job(provider, job_title=f"Job {i}")

        page_one, total = await jobs.list_jobs(db, page=1, limit=2)
        page_three, _ = await jobs.list_jobs(db, page=3, limit=2)

        assert total == 5
        assert len(page_one) == 2
        assert len(page_three) == 1

    @pytest.mark.asyncio
    async def test_provider_jobs_include_inactive(self, db, make_provider, make_job):
        user, provider = await make_provider(status="verified")
        await make_job(provider)
        await make_job(provider, is_active=False)
        _, other = await make_provider(status="verified")
        await make_job(other)

        items, total = await jobs.list_provider_jobs(db, principal_for(user))

        assert total == 2
        assert all(j.provider_id == provider.id for j in items)
