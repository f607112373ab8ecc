"""
Provider Model - company profile owned 1:1 by a provider user

Verification Flow:
    pending → verified
    pending → rejected
    rejected → pending (resubmission)
    admin may set any of the three values directly

Company documents live in their own table. Each carries a stable UUID and a
``position`` maintained by ``ordering_list``: removing a document shifts the
positions of the ones after it, but identifiers never change.
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, LargeBinary
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import deferred, relationship
from app.database import Base
from app.models.mixins import TimestampMixin
import enum
import uuid


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Provider(TimestampMixin, Base):
    """
    Hiring organization.

    Attributes:
        user_id: owning user (unique: at most one Provider per user)
        verification_status: admin-controlled trust flag gating job posting
        rejection_reason: set when an admin rejects
        verification_notes: set when an admin reverts to pending
        documents: ordered verification documents (PDFs)
    """

    __tablename__ = "providers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    company_name = Column(String(500), nullable=False)
    company_email = Column(String(320), nullable=True)
    company_phone = Column(String(50), nullable=True)
    company_website = Column(String(2000), nullable=True)
    industry = Column(String(200), nullable=True)
    location = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    employee_count = Column(String(50), nullable=True)
    company_logo = Column(String(500), nullable=True)
    tax_id = Column(String(100), nullable=True)
    business_license = Column(String(200), nullable=True)
    verification_status = Column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value, index=True
    )
    verification_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    documents = relationship(
        "ProviderDocument",
        order_by="ProviderDocument.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def company_docs(self):
        return self.documents


class ProviderDocument(Base):
    __tablename__ = "provider_documents"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    provider_id = Column(String, ForeignKey("providers.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    filename = Column(String(500), nullable=False)
    content_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False, default=0)
    data = deferred(Column(LargeBinary, nullable=False))
