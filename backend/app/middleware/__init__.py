"""
Middleware Package

Prometheus request metrics plus the job board's domain event counters.
"""

from app.middleware.metrics import PrometheusMiddleware, setup_metrics

__all__ = ["PrometheusMiddleware", "setup_metrics"]
