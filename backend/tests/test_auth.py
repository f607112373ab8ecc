"""
Tests for identity and the auth boundary

Tests cover:
- Role-tagged registration payloads
- Login failures (401 mismatch, 403 deactivated)
- Bearer token checks and role gating
- Required signing secret
- Error payload shape
"""

import pytest
from pydantic import ValidationError

from conftest import PASSWORD, auth_headers
from app.config import Settings
from app.models import UserRole


def applicant_form(**overrides) -> dict:
    data = {
        "role": "applicant",
        "name": "Ada Applicant",
        "email": "ada@example.com",
        "password": PASSWORD,
        "phone": "555-0101",
        "location": "Lisbon",
        "skills": "python, sql ,",
        "experience": "3",
    }
    data.update(overrides)
    return data


def provider_form(**overrides) -> dict:
    data = {
        "role": "provider",
        "name": "Pat Provider",
        "email": "pat@acme.com",
        "password": PASSWORD,
        "phone": "555-0102",
        "companyName": "Acme Corp",
        "companyWebsite": "https://acme.example",
        "taxId": "TX-1",
    }
    data.update(overrides)
    return data


class TestRegister:
    """POST /auth/register"""

    @pytest.mark.asyncio
    async def test_applicant_registration(self, client):
        response = await client.post("/auth/register", data=applicant_form())

        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        user = body["user"]
        assert user["role"] == "applicant"
        assert user["email"] == "ada@example.com"
        assert user["skills"] == ["python", "sql"]
        assert user["experience"] == 3
        assert user["isActive"] is True
        assert user["hasResume"] is False
        assert "passwordHash" not in user

    @pytest.mark.asyncio
    async def test_applicant_with_resume(self, client):
        files = {"resume": ("cv.pdf", b"%PDF-1.4 cv", "application/pdf")}

        response = await client.post("/auth/register", data=applicant_form(), files=files)

        assert response.status_code == 201
        token = response.json()["token"]
        download = await client.get(
            "/auth/me/resume", headers={"Authorization": f"Bearer {token}"}
        )
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4 cv"
        assert download.headers["content-disposition"] == 'attachment; filename="cv.pdf"'

    @pytest.mark.asyncio
    async def test_provider_registration_creates_pending_profile_with_docs(self, client):
        files = [
            ("companyDocs", ("license.pdf", b"%PDF license", "application/pdf")),
            ("companyDocs", ("tax.pdf", b"%PDF tax", "application/pdf")),
        ]

        response = await client.post("/auth/register", data=provider_form(), files=files)

        assert response.status_code == 201
        token = response.json()["token"]
        profile = await client.get(
            "/provider/profile", headers={"Authorization": f"Bearer {token}"}
        )
        assert profile.status_code == 200
        body = profile.json()
        assert body["companyName"] == "Acme Corp"
        assert body["verificationStatus"] == "pending"
        assert [d["filename"] for d in body["companyDocs"]] == ["license.pdf", "tax.pdf"]
        assert [d["position"] for d in body["companyDocs"]] == [0, 1]

    @pytest.mark.asyncio
    async def test_too_many_provider_documents(self, client):
        files = [
            ("companyDocs", (f"doc{i}.pdf", b"%PDF", "application/pdf")) for i in range(6)
        ]

        response = await client.post("/auth/register", data=provider_form(), files=files)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_email_conflict(self, client):
        await client.post("/auth/register", data=applicant_form())

        response = await client.post(
            "/auth/register", data=applicant_form(email="ADA@example.com")
        )

        assert response.status_code == 409
        assert response.json()["message"] == "User already exists"

    @pytest.mark.asyncio
    async def test_admin_cannot_self_register(self, client):
        response = await client.post("/auth/register", data=applicant_form(role="admin"))

        assert response.status_code == 400
        assert "errors" in response.json()

    @pytest.mark.asyncio
    async def test_short_password_rejected(self, client):
        response = await client.post("/auth/register", data=applicant_form(password="123"))

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"].endswith("password")


class TestLogin:
    """POST /auth/login"""

    @pytest.mark.asyncio
    async def test_login_success(self, client, make_user):
        user = await make_user(email="lee@example.com")

        response = await client.post(
            "/auth/login", json={"email": "lee@example.com", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id
        assert response.json()["user"]["lastLogin"] is not None

    @pytest.mark.asyncio
    async def test_wrong_password_unauthenticated(self, client, make_user):
        await make_user(email="lee@example.com")

        response = await client.post(
            "/auth/login", json={"email": "lee@example.com", "password": "nope-nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_deactivated_forbidden(self, client, make_user):
        await make_user(email="off@example.com", is_active=False)

        response = await client.post(
            "/auth/login", json={"email": "off@example.com", "password": PASSWORD}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_fields(self, client):
        response = await client.post("/auth/login", json={"email": "", "password": ""})

        assert response.status_code == 400


class TestBearerToken:
    """Token and role checks on protected routes."""

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "No token provided"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_returns_camel_case(self, client, make_user):
        user = await make_user(company_name=None)

        response = await client.get("/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == user.id
        assert "createdAt" in body
        assert "hasProfileImage" in body

    @pytest.mark.asyncio
    async def test_deactivated_token_rejected(self, client, make_user, db):
        user = await make_user()
        headers = auth_headers(user)
        user.is_active = False
        await db.commit()

        response = await client.get("/auth/me", headers=headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_role_gate(self, client, make_user):
        applicant = await make_user(UserRole.APPLICANT.value)

        response = await client.get("/admin/users", headers=auth_headers(applicant))

        assert response.status_code == 403
        assert response.json()["message"].startswith("Access denied")


class TestProfile:
    """Self-service profile updates."""

    @pytest.mark.asyncio
    async def test_update_profile_and_image(self, client, make_user):
        user = await make_user()
        headers = auth_headers(user)

        response = await client.put(
            "/auth/profile",
            headers=headers,
            data={"bio": "Hello", "skills": "go,rust"},
            files={"profileImage": ("me.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 200
        updated = response.json()["user"]
        assert updated["bio"] == "Hello"
        assert updated["skills"] == ["go", "rust"]
        assert updated["hasProfileImage"] is True

        image = await client.get("/auth/me/profile-image", headers=headers)
        assert image.status_code == 200
        assert image.headers["content-type"] == "image/png"

    @pytest.mark.asyncio
    async def test_resume_missing(self, client, make_user):
        user = await make_user()

        response = await client.get("/auth/me/resume", headers=auth_headers(user))

        assert response.status_code == 404


class TestSettings:
    """The signing secret has no default."""

    def test_missing_secret_fails(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_blank_secret_fails(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key="   ")
