from sqlalchemy import Column, String, Text, ForeignKey
from app.database import Base
from app.models.mixins import TimestampMixin
import enum
import uuid


class ComplaintTargetType(str, enum.Enum):
    PROVIDER = "provider"
    JOB = "job"
    APPLICATION = "application"
    USER = "user"


class ComplaintStatus(str, enum.Enum):
    OPEN = "open"
    IN_REVIEW = "in_review"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Complaint(TimestampMixin, Base):
    """
    User-filed complaint about a provider, job, application or user.

    target_id is a loose reference: it is not checked against the target table.
    """

    __tablename__ = "complaints"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=ComplaintStatus.OPEN.value, index=True)
    admin_response = Column(Text, nullable=True)
