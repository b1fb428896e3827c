"""Protocol-agnostic health check providers."""

from svc_health.resources.health import HealthProvider

__all__ = ["HealthProvider"]
