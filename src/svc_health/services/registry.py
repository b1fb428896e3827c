"""ServiceRegistry: service name to optional redirect handler."""

from __future__ import annotations

import threading

from svc_health.models.health import Handler

_MISSING = object()


class ServiceRegistry:
    """Thread-safe mapping of service names to optional forwarding handlers.

    A name mapped to ``None`` is served locally; a name mapped to a handler
    is forwarded. The lock guards reads as well as writes.
    """

    def __init__(self) -> None:
        self._services: dict[str, Handler | None] = {}
        self._lock = threading.Lock()

    def register(self, service: str, handler: Handler | None = None) -> None:
        """Insert or overwrite the entry for ``service``. Last call wins."""
        with self._lock:
            self._services[service] = handler

    def unregister(self, service: str) -> None:
        with self._lock:
            self._services.pop(service, None)

    def lookup(self, service: str) -> tuple[bool, Handler | None]:
        """Return ``(known, handler)`` for ``service``."""
        with self._lock:
            handler = self._services.get(service, _MISSING)
        if handler is _MISSING:
            return False, None
        return True, handler  # type: ignore[return-value]

    def services(self) -> list[str]:
        """Registered service names, sorted."""
        with self._lock:
            return sorted(self._services)

    def __contains__(self, service: object) -> bool:
        with self._lock:
            return service in self._services

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)
