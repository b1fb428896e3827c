"""Health check facade for HTTP micro-services."""

from svc_health.clients.health_client import HealthClient
from svc_health.errors import (
    BadRequestError,
    HealthCheckError,
    InternalEncodingError,
    ResponseDecodeError,
    UpstreamStatusError,
    ValidationError,
)
from svc_health.models.health import (
    STD_ROUTE,
    HealthReply,
    HealthRequest,
    OutputFormat,
)
from svc_health.resources.health import HealthProvider

__all__ = [
    "STD_ROUTE",
    "BadRequestError",
    "HealthCheckError",
    "HealthClient",
    "HealthProvider",
    "HealthReply",
    "HealthRequest",
    "InternalEncodingError",
    "OutputFormat",
    "ResponseDecodeError",
    "UpstreamStatusError",
    "ValidationError",
]
