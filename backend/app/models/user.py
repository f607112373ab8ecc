"""
User Model - accounts for applicants, providers and admins

Attachments (resume PDF, profile image) are stored inline as three columns
each: bytes, content type and original filename. The byte columns are
deferred so that loading a user for authentication never pulls a blob.
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, JSON, LargeBinary
from sqlalchemy.orm import deferred
from app.database import Base
from app.models.mixins import TimestampMixin
import enum
import uuid


class UserRole(str, enum.Enum):
    APPLICANT = "applicant"
    PROVIDER = "provider"
    ADMIN = "admin"


class User(TimestampMixin, Base):
    """
    Platform account.

    Attributes:
        role: applicant | provider | admin
        email: unique login identifier
        password_hash: werkzeug password hash, never serialized
        is_active: admin-controlled; inactive users cannot log in
        skills/experience/location: applicant profile fields
        company_name: provider display name mirrored from the Provider row
        resume_*: profile-level resume, fallback for application downloads
        profile_image_*: avatar image
    """

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    role = Column(String(20), nullable=False, default=UserRole.APPLICANT.value, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    bio = Column(Text, nullable=True)
    location = Column(String(500), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    experience = Column(Integer, nullable=False, default=0)
    company_name = Column(String(500), nullable=True)

    resume_data = deferred(Column(LargeBinary, nullable=True))
    resume_content_type = Column(String(100), nullable=True)
    resume_filename = Column(String(500), nullable=True)

    profile_image_data = deferred(Column(LargeBinary, nullable=True))
    profile_image_content_type = Column(String(100), nullable=True)
    profile_image_filename = Column(String(500), nullable=True)

    @property
    def has_resume(self) -> bool:
        return self.resume_filename is not None

    @property
    def has_profile_image(self) -> bool:
        return self.profile_image_filename is not None
