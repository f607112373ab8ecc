from app.models.user import User, UserRole
from app.models.provider import Provider, ProviderDocument, VerificationStatus
from app.models.job import Job, JobType
from app.models.application import Application, ApplicationStatus
from app.models.notification import Notification
from app.models.complaint import Complaint, ComplaintStatus, ComplaintTargetType

__all__ = [
    "User",
    "UserRole",
    "Provider",
    "ProviderDocument",
    "VerificationStatus",
    "Job",
    "JobType",
    "Application",
    "ApplicationStatus",
    "Notification",
    "Complaint",
    "ComplaintStatus",
    "ComplaintTargetType",
]
