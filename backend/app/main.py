"""
Job Board API - Main Application Entry Point

This module initializes the FastAPI application with:
- Database connection and schema initialization
- Service error, validation error and store error handlers
- CORS middleware for frontend communication
- Prometheus metrics middleware
- API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (startup)
    ├── Exception Handlers (ServiceError, RequestValidationError, SQLAlchemyError)
    ├── CORS Middleware (settings.cors_origins)
    ├── Prometheus Middleware (/metrics)
    └── API Router
        ├── /auth - Registration, login, self-service profile
        ├── /jobs - Job postings
        ├── /applications - Applications and their lifecycle
        ├── /provider - Provider profile, documents, applicants
        ├── /admin - Moderation and provider verification
        ├── /notifications - Per-user notification ledger
        └── /complaints - Complaint filing and review
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api import api_router
from app.config import get_settings
from app.database import init_db
from app.errors import Internal, ServiceError
from app.middleware import setup_metrics

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Configure logging
        2. Initialize database tables

    Yields:
        Control to the application during its runtime
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_db()
    logger.info("Job board API started")
    yield


app = FastAPI(
    title="Job Board API",
    description="Job board backend with provider verification and application tracking",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    message = ", ".join(err.get("msg", "Invalid value") for err in errors) or "Invalid request"
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} database error: {exc}")
    extra = {"error": str(exc)} if settings.debug else {}
    error = Internal("Internal server error", **extra)
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_metrics(app)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
