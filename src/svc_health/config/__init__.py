"""Configuration package: re-exports for convenience."""

from svc_health.config.loader import ConfigLoader
from svc_health.config.settings import Settings

__all__ = ["ConfigLoader", "Settings"]
