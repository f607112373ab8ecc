"""
Prometheus metrics for the job board API

HTTP layer (PrometheusMiddleware):
    http_request_duration_seconds{method, route, status}   histogram
    http_requests_total{method, route, status}             counter
    http_requests_in_flight{method}                        gauge

Domain events (record_* helpers, called from the services):
    jobboard_applications_created_total
    jobboard_applications_deleted_total
    jobboard_application_status_updates_total{status}
    jobboard_verification_decisions_total{status}
    jobboard_providers_provisioned_total
    jobboard_notifications_emitted_total{type}
    jobboard_notification_failures_total{type}

Routes are labelled by their template (/applications/{application_id}),
never by the concrete path. Requests no route matches share the "unmatched"
label, so label cardinality stays bounded.

Scrape endpoint: GET /metrics
"""

import time
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

METRICS_PATH = "/metrics"
UNMATCHED_ROUTE = "unmatched"

# ==================== HTTP ====================

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "route", "status"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "HTTP requests served",
    ["method", "route", "status"],
)

REQUESTS_IN_FLIGHT = Gauge(
    "http_requests_in_flight",
    "HTTP requests currently being handled",
    ["method"],
)

# ==================== Applications ====================

APPLICATIONS_CREATED = Counter(
    "jobboard_applications_created_total",
    "Applications submitted",
)

APPLICATIONS_DELETED = Counter(
    "jobboard_applications_deleted_total",
    "Applications deleted by their applicant or an admin",
)

APPLICATION_STATUS_UPDATES = Counter(
    "jobboard_application_status_updates_total",
    "Application status changes made by providers",
    ["status"],
)

# ==================== Providers ====================

VERIFICATION_DECISIONS = Counter(
    "jobboard_verification_decisions_total",
    "Admin verification decisions",
    ["status"],  # verified, rejected, pending
)

PROVIDERS_PROVISIONED = Counter(
    "jobboard_providers_provisioned_total",
    "Provider profiles created implicitly on first provider-scoped request",
)

# ==================== Notifications ====================

NOTIFICATIONS_EMITTED = Counter(
    "jobboard_notifications_emitted_total",
    "Notifications written",
    ["type"],
)

NOTIFICATION_FAILURES = Counter(
    "jobboard_notification_failures_total",
    "Best-effort notification writes that failed",
    ["type"],
)


def route_template(request: Request) -> str:
    """
    The matched route's path template, e.g. /jobs/{job_id}.

    Rebuilt from the path parameters routing stored in the scope; requests
    that matched no route get UNMATCHED_ROUTE.
    """
    if request.scope.get("endpoint") is None:
        return UNMATCHED_ROUTE
    names = {str(value): name for name, value in request.scope.get("path_params", {}).items()}
    segments = request.scope["path"].split("/")
    return "/".join(f"{{{names[s]}}}" if s in names else s for s in segments)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Times every request and counts it by method, route template and status."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        in_flight = REQUESTS_IN_FLIGHT.labels(method=method)
        in_flight.inc()
        status = "500"
        start = time.perf_counter()

        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        except Exception as e:
            logger.error(f"Unhandled error on {method} {request.url.path}: {e}")
            raise
        finally:
            # Routing has filled in the scope by now
            route = route_template(request)
            REQUEST_LATENCY.labels(method=method, route=route, status=status).observe(
                time.perf_counter() - start
            )
            REQUEST_COUNT.labels(method=method, route=route, status=status).inc()
            in_flight.dec()


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app: FastAPI) -> None:
    """Install the middleware and the scrape endpoint on ``app``."""
    app.add_middleware(PrometheusMiddleware)
    app.add_route(METRICS_PATH, metrics_endpoint, methods=["GET"])
    logger.info("Prometheus metrics configured")


# ==================== Domain event helpers ====================

def record_application_created() -> None:
    APPLICATIONS_CREATED.inc()


def record_application_deleted() -> None:
    APPLICATIONS_DELETED.inc()


def record_status_update(status: str) -> None:
    APPLICATION_STATUS_UPDATES.labels(status=status).inc()


def record_verification_decision(status: str) -> None:
    VERIFICATION_DECISIONS.labels(status=status).inc()


def record_provider_provisioned() -> None:
    PROVIDERS_PROVISIONED.inc()


def record_notification(notification_type: str) -> None:
    NOTIFICATIONS_EMITTED.labels(type=notification_type).inc()


def record_notification_failure(notification_type: str) -> None:
    NOTIFICATION_FAILURES.labels(type=notification_type).inc()
