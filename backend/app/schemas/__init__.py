from app.schemas.common import CamelModel, Pagination, MessageResponse, build_pagination
from app.schemas.auth import (
    ApplicantRegistration,
    ProviderRegistration,
    RegistrationRequest,
    LoginRequest,
    UserResponse,
    AuthResponse,
    UserEnvelope,
    ProfileUpdate,
)
from app.schemas.provider import (
    ProviderDocumentResponse,
    ProviderProfileInput,
    ProviderResponse,
    ProviderEnvelope,
    ProviderListResponse,
    VerificationDecision,
    ProviderStats,
)
from app.schemas.job import JobCreate, JobUpdate, JobResponse, JobEnvelope, JobListResponse, SalaryRange
from app.schemas.application import (
    ApplicationResponse,
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicantListResponse,
    StatusUpdate,
    UserApplicationStats,
)
from app.schemas.notification import (
    NotificationResponse,
    NotificationEnvelope,
    NotificationListResponse,
    UnreadCount,
)
from app.schemas.complaint import (
    ComplaintCreate,
    ComplaintReview,
    ComplaintResponse,
    ComplaintEnvelope,
    ComplaintListResponse,
)
from app.schemas.admin import UserListResponse, PlatformStats

__all__ = [
    "CamelModel",
    "Pagination",
    "MessageResponse",
    "build_pagination",
    "ApplicantRegistration",
    "ProviderRegistration",
    "RegistrationRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "UserEnvelope",
    "ProfileUpdate",
    "ProviderDocumentResponse",
    "ProviderProfileInput",
    "ProviderResponse",
    "ProviderEnvelope",
    "ProviderListResponse",
    "VerificationDecision",
    "ProviderStats",
    "JobCreate",
    "JobUpdate",
    "JobResponse",
    "JobEnvelope",
    "JobListResponse",
    "SalaryRange",
    "ApplicationResponse",
    "ApplicationEnvelope",
    "ApplicationListResponse",
    "ApplicantListResponse",
    "StatusUpdate",
    "UserApplicationStats",
    "NotificationResponse",
    "NotificationEnvelope",
    "NotificationListResponse",
    "UnreadCount",
    "ComplaintCreate",
    "ComplaintReview",
    "ComplaintResponse",
    "ComplaintEnvelope",
    "ComplaintListResponse",
    "UserListResponse",
    "PlatformStats",
]
