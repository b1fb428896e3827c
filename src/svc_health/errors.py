"""Health check error hierarchy. Every error is terminal for its request."""

from __future__ import annotations


class HealthCheckError(Exception):
    """Base class for health check failures. Carries the HTTP status to report."""

    status_code: int = 500


class BadRequestError(HealthCheckError):
    """Malformed input, unknown output format, or missing service name."""

    status_code = 400


class ValidationError(HealthCheckError):
    """Raised by a validator when it rejects a request."""

    status_code = 400


class InternalEncodingError(HealthCheckError):
    """Raised when a health message cannot be serialized."""

    status_code = 500


class ResponseDecodeError(HealthCheckError):
    """Raised when a health check response body cannot be decoded."""

    status_code = 502


class UpstreamStatusError(HealthCheckError):
    """Raised when a downstream health check answers with a non-200 status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        super().__init__(
            f"expected status 200 OK, got {status_code} {reason}. Mesg: {body}",
        )
        self.status_code = status_code
        self.reason = reason
        self.body = body
