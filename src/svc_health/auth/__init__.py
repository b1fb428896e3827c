"""Request authentication."""

from svc_health.auth.validator import JWTValidator, Validator

__all__ = ["JWTValidator", "Validator"]
