"""
Shared fixtures: an in-memory database per test, entity factories and an
HTTP client bound to the app with its session dependency overridden.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.auth import Principal, create_access_token, hash_password
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Job, Provider, ProviderDocument, User, UserRole, VerificationStatus

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


def principal_for(user: User) -> Principal:
    return Principal(id=user.id, role=user.role, name=user.name, email=user.email)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def make_user(db):
    """Factory for persisted users."""
    counter = {"n": 0}

    async def _make_user(role: str = UserRole.APPLICANT.value, **kwargs) -> User:
        counter["n"] += 1
        user = User(
            role=role,
            name=kwargs.pop("name", f"{role.title()} {counter['n']}"),
            email=kwargs.pop("email", f"{role}{counter['n']}@example.com"),
            password_hash=hash_password(kwargs.pop("password", PASSWORD)),
            phone=kwargs.pop("phone", "555-0100"),
            **kwargs,
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest.fixture
def make_provider(db, make_user):
    """Factory for a provider user plus its Provider row."""

    async def _make_provider(
        status: str = VerificationStatus.PENDING.value,
        documents: int = 0,
        **kwargs,
    ) -> tuple[User, Provider]:
        user = await make_user(UserRole.PROVIDER.value, company_name=kwargs.get("company_name", "Acme"))
        provider = Provider(
            user_id=user.id,
            company_name=kwargs.pop("company_name", "Acme"),
            verification_status=status,
            documents=[],
            **kwargs,
        )
        for i in range(documents):
            provider.documents.append(
                ProviderDocument(
                    filename=f"doc{i}.pdf",
                    content_type="application/pdf",
                    size=4,
                    data=b"%PDF",
                )
            )
        db.add(provider)
        await db.commit()
        return user, provider

    return _make_provider


@pytest.fixture
def make_job(db):
    """Factory for active jobs owned by a provider."""

    async def _make_job(provider: Provider, **kwargs) -> Job:
        job = Job(
            provider_id=provider.id,
            job_title=kwargs.pop("job_title", "Backend Engineer"),
            description=kwargs.pop("description", "Build APIs"),
            location=kwargs.pop("location", "Remote"),
            job_type=kwargs.pop("job_type", "Full-time"),
            applications_count=kwargs.pop("applications_count", 0),
            is_active=kwargs.pop("is_active", True),
            skills=kwargs.pop("skills", []),
            **kwargs,
        )
        db.add(job)
        await db.commit()
        return job

    return _make_job
