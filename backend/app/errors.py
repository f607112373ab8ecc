"""
Service Errors - failure taxonomy shared by every service and router.

Services raise these exceptions; the handlers registered in ``app.main``
turn them into JSON responses of the form ``{"message": ..., **extra}``.

Taxonomy:
    InvalidArgument  400  malformed or missing field, bad enum value
    Unauthenticated  401  missing, invalid or expired token
    Forbidden        403  authenticated but not entitled (role or ownership)
    NotFound         404  entity absent or document id unknown
    Conflict         409  uniqueness violation (email, application pair)
    Internal         500  unexpected store/backend failure
"""

from typing import Any


class ServiceError(Exception):
    """Base class for failures that map onto an HTTP status code."""

    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, **self.extra}


class InvalidArgument(ServiceError):
    status_code = 400


class Unauthenticated(ServiceError):
    status_code = 401


class Forbidden(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409


class Internal(ServiceError):
    status_code = 500
