from fastapi import APIRouter
from app.api import admin, applications, auth, complaints, jobs, notifications, provider

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(applications.router, prefix="/applications", tags=["applications"])
api_router.include_router(provider.router, prefix="/provider", tags=["provider"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(complaints.router, prefix="/complaints", tags=["complaints"])
