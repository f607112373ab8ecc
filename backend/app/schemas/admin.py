from pydantic import BaseModel

from app.schemas.auth import UserResponse
from app.schemas.common import CamelModel, Pagination


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: Pagination


class PlatformStats(CamelModel):
    total_users: int
    total_applicants: int
    total_providers: int
    total_jobs: int
    total_applications: int
    total_offers: int
