"""HTTP clients for health checks."""

from svc_health.clients.health_client import HealthClient
from svc_health.clients.upstream import UpstreamHandler

__all__ = ["HealthClient", "UpstreamHandler"]
