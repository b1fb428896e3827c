"""Health check controller: thin HTTP adapter."""

from __future__ import annotations

from litestar import Controller, HttpMethod, Request, Response, route
from litestar.datastructures import State

from svc_health.models.health import STD_ROUTE, Handler, HealthRequest


async def _to_health_request(request: Request[object, object, State]) -> HealthRequest:
    """Snapshot the Litestar request. Repeated query keys keep their first value."""
    query: dict[str, str] = {}
    for key, value in request.query_params.items():
        query.setdefault(key, value)
    return HealthRequest(
        method=request.method,
        query=query,
        headers=dict(request.headers),
        body=await request.body(),
    )


class HealthController(Controller):
    """HTTP adapter for health checks."""

    path = STD_ROUTE

    @route("/", http_method=[HttpMethod.GET, HttpMethod.POST])
    async def health(self, request: Request[object, object, State]) -> Response[bytes]:
        """Answer or forward a health check for the requested service."""
        health_handler: Handler = request.app.state.health_handler
        reply = await health_handler(await _to_health_request(request))
        return Response(
            content=reply.body,
            status_code=reply.status_code,
            media_type=reply.media_type,
        )
