"""
Job Model - job postings owned by a verified provider

Lifecycle:
    created (is_active=True) → deleted (is_active=False)

Deletion is a soft flag flip so applications keep their job reference and
the historical applications_count survives.

applications_count is a materialized count of the job's applications. It is
only changed by atomic SQL updates issued in the same transaction as the
application insert/delete (see app.services.applications).
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, JSON, ForeignKey
from app.database import Base
from app.models.mixins import TimestampMixin
import enum
import uuid


class JobType(str, enum.Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    INTERNSHIP = "Internship"
    CONTRACT = "Contract"


class Job(TimestampMixin, Base):
    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    provider_id = Column(String, ForeignKey("providers.id"), nullable=False, index=True)
    job_title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(500), nullable=False)
    job_type = Column(String(20), nullable=False)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String(10), nullable=False, default="USD")
    experience = Column(String(200), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    qualification = Column(String(500), nullable=True)
    applications_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    deadline = Column(DateTime(timezone=True), nullable=True)

    @property
    def salary(self) -> dict:
        return {
            "min": self.salary_min,
            "max": self.salary_max,
            "currency": self.salary_currency,
        }
