"""
Application Model - one applicant applying to one job

Status values:
    Applied (initial), Interview, Offer, Rejected, Withdrawn

The status is a classification label: any of the five values may follow any
other. Only enum membership is validated.

provider_id is copied from the job at creation time and is the authority
for provider-side ownership checks from then on.
"""

from sqlalchemy import (
    Column, String, Integer, Text, DateTime, ForeignKey, LargeBinary, UniqueConstraint,
)
from sqlalchemy.orm import deferred, relationship
from app.database import Base
from app.models.mixins import TimestampMixin, utcnow
import enum
import uuid


class ApplicationStatus(str, enum.Enum):
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


class Application(TimestampMixin, Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(String, ForeignKey("jobs.id"), nullable=False, index=True)
    provider_id = Column(String, ForeignKey("providers.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.APPLIED.value, index=True)
    applied_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    interview_date = Column(DateTime(timezone=True), nullable=True)
    interview_notes = Column(Text, nullable=True)
    offer_details = Column(Text, nullable=True)
    feedback = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    cover_letter = Column(Text, nullable=True)
    resume_used = Column(String(500), nullable=True)

    resume_data = deferred(Column(LargeBinary, nullable=True))
    resume_content_type = Column(String(100), nullable=True)
    resume_filename = Column(String(500), nullable=True)

    job = relationship("Job", lazy="selectin")

    @property
    def has_resume(self) -> bool:
        return self.resume_filename is not None
