"""Health check wire-level types shared by the server handler and client helper."""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace

from svc_health.errors import BadRequestError

STD_ROUTE = "/health"
SERVICE_KEY = "service"
FORMAT_KEY = "format"


class OutputFormat(str, enum.Enum):
    """Wire encoding selected for a health response."""

    PROTO = "proto"
    JSON = "json"
    MESSAGE = "mesg"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        """Parse a ``format`` query value, case-insensitively.

        Raises:
            BadRequestError: If the value names no known format.
        """
        try:
            return cls(value.lower())
        except ValueError as error:
            raise BadRequestError(f"bad request output format: {value!r}") from error


MEDIA_TYPES: dict[OutputFormat, str] = {
    OutputFormat.PROTO: "application/x-protobuf",
    OutputFormat.JSON: "application/json",
    OutputFormat.MESSAGE: "text/plain",
}


@dataclass(frozen=True)
class HealthRequest:
    """Transport-neutral view of an inbound health check request."""

    method: str = "GET"
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def with_body(self, body: bytes) -> HealthRequest:
        """Return a copy of this request carrying ``body``."""
        return replace(self, body=body)


@dataclass(frozen=True)
class HealthReply:
    """Transport-neutral health check reply."""

    status_code: int
    body: bytes
    media_type: str = "text/plain"

    @classmethod
    def error(cls, status_code: int, message: str) -> HealthReply:
        """Plain-text error reply."""
        return cls(status_code=status_code, body=message.encode())


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a client-side health check."""

    serving: bool
    status: str


Handler = Callable[[HealthRequest], Awaitable[HealthReply]]
