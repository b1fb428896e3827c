"""Settings model: pydantic-settings with env var support."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from svc_health.models.health import OutputFormat

ENV_PREFIX = "SVC_HEALTH_"


class Settings(BaseSettings):
    """Health service settings.

    Use ``ConfigLoader.load_settings()`` to build with YAML + env var layering.
    Direct construction (e.g. in tests) skips YAML loading.

    ``services`` maps each service name to an upstream health URL to forward
    to, or to ``None`` to answer SERVING locally.
    """

    output_format: OutputFormat = OutputFormat.PROTO
    services: dict[str, str | None] = {}
    upstream_timeout: float = 5.0
    auth_required: bool = False
    secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "svc-health"
    token_expire_minutes: int = 60
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {"env_prefix": ENV_PREFIX}
