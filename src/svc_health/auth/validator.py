"""Request validators consulted before a health check is processed."""

from __future__ import annotations

from typing import Protocol

from svc_health.errors import ValidationError
from svc_health.models.health import HealthRequest
from svc_health.utils.jwt import JWTManager
from svc_health.utils.logging import get_logger


class Validator(Protocol):
    """Anything that can accept or reject an inbound health request."""

    def validate(self, request: HealthRequest) -> None:
        """Return normally to accept. Any exception rejects the request with 400."""


class JWTValidator:
    """Accept requests carrying a health-scoped ``Authorization: Bearer`` token."""

    def __init__(self) -> None:
        self._log = get_logger(component="jwt_validator")

    def validate(self, request: HealthRequest) -> None:
        header = _header(request, "authorization")
        if not header.startswith("Bearer "):
            raise ValidationError("Missing or invalid Authorization header")
        try:
            caller = JWTManager.verify_caller(header[len("Bearer "):])
        except ValueError as error:
            raise ValidationError(str(error)) from error
        self._log.debug("health_caller_accepted", caller=caller, method=request.method)


def _header(request: HealthRequest, name: str) -> str:
    """Case-insensitive header lookup."""
    for key, value in request.headers.items():
        if key.lower() == name:
            return value
    return ""
