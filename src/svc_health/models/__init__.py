"""Health check models."""

from svc_health.models.health import (
    FORMAT_KEY,
    MEDIA_TYPES,
    SERVICE_KEY,
    STD_ROUTE,
    CheckResult,
    Handler,
    HealthReply,
    HealthRequest,
    OutputFormat,
)

__all__ = [
    "FORMAT_KEY",
    "MEDIA_TYPES",
    "SERVICE_KEY",
    "STD_ROUTE",
    "CheckResult",
    "Handler",
    "HealthReply",
    "HealthRequest",
    "OutputFormat",
]
