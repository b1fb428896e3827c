"""Forward health checks to a remote service's own health endpoint."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from svc_health.models.health import HealthReply, HealthRequest
from svc_health.utils.logging import get_logger

# Per-connection or recomputed by httpx for the re-encoded body.
_DROPPED_HEADERS = frozenset({
    "host",
    "content-length",
    "content-type",
    "transfer-encoding",
    "connection",
    "keep-alive",
    "upgrade",
})


def _forwarded_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Caller headers minus hop-by-hop ones, with the protobuf content type."""
    forwarded = {
        key: value for key, value in headers.items()
        if key.lower() not in _DROPPED_HEADERS
    }
    forwarded["Content-Type"] = "application/x-protobuf"
    return forwarded


class UpstreamHandler:
    """Health check handler that proxies the check to ``url`` over HTTP.

    One ``httpx.AsyncClient`` is held per handler so connections are reused;
    call ``aclose()`` on shutdown. The caller's method, query and headers
    (``Authorization`` included) travel with the re-encoded body. The remote
    reply is returned unchanged. Transport failures become a 502 plain-text
    reply.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self._log = get_logger(component="upstream_handler", url=url)

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        """Close the pooled HTTP client."""
        await self._client.aclose()

    async def __call__(self, request: HealthRequest) -> HealthReply:
        try:
            response = await self._client.request(
                request.method,
                self._url,
                params=dict(request.query),
                content=request.body,
                headers=_forwarded_headers(request.headers),
            )
        except httpx.HTTPError as error:
            self._log.warning("upstream_unreachable", error=str(error))
            return HealthReply.error(
                502, f"could not reach upstream health check: {error}",
            )
        return HealthReply(
            status_code=response.status_code,
            body=response.content,
            media_type=response.headers.get("content-type", "text/plain"),
        )
