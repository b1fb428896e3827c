"""Tests for the /health endpoint served by the Litestar app."""

from __future__ import annotations

import httpx
import pytest

from svc_health.app import AppFactory, create_app
from svc_health.config import Settings
from svc_health.models.health import HealthReply, HealthRequest, OutputFormat
from svc_health.resources.health import HealthProvider
from svc_health.utils.codec import SERVICE_UNKNOWN, SERVING, HealthCodec
from svc_health.utils.jwt import JWTManager
from tests.conftest import SERVICE, proto_status


@pytest.mark.asyncio
async def test_health_query_returns_json(client: httpx.AsyncClient) -> None:
    """GET /health?service=... answers in the configured JSON format."""
    resp = await client.get("/health", params={"service": SERVICE})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"status": "SERVING"}


@pytest.mark.asyncio
async def test_health_post_body(client: httpx.AsyncClient, codec: HealthCodec) -> None:
    """POST with a binary request body; status is 200, not 201."""
    resp = await client.post("/health", content=codec.encode_request(SERVICE))
    assert resp.status_code == 200
    assert resp.content == b'{"status":"SERVING"}'


@pytest.mark.asyncio
async def test_health_get_with_body(client: httpx.AsyncClient, codec: HealthCodec) -> None:
    resp = await client.request(
        "GET", "/health", content=codec.encode_request(SERVICE), params={"format": "proto"},
    )
    assert resp.status_code == 200
    assert proto_status(resp.content) == SERVING


@pytest.mark.asyncio
async def test_health_unknown_service_message(client: httpx.AsyncClient) -> None:
    resp = await client.get("/health", params={"service": "svc-x", "format": "mesg"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "SERVICE_UNKNOWN"


@pytest.mark.asyncio
async def test_health_unknown_service_proto(client: httpx.AsyncClient) -> None:
    resp = await client.get("/health", params={"service": "svc-x", "format": "proto"})
    assert proto_status(resp.content) == SERVICE_UNKNOWN


@pytest.mark.asyncio
async def test_health_invalid_format(client: httpx.AsyncClient) -> None:
    resp = await client.get("/health", params={"service": SERVICE, "format": "yaml"})
    assert resp.status_code == 400
    assert "bad request output format" in resp.text


@pytest.mark.asyncio
async def test_health_missing_service(client: httpx.AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 400
    assert "could not get service name" in resp.text


@pytest.mark.asyncio
async def test_health_repeated_query_keeps_first(client: httpx.AsyncClient) -> None:
    resp = await client.get("/health?service=svc-x&service=" + SERVICE + "&format=mesg")
    assert resp.text == "SERVICE_UNKNOWN"


@pytest.mark.asyncio
async def test_health_forwards_to_registered_handler() -> None:
    """A provider passed to create_app keeps its redirects."""

    async def redirect(request: HealthRequest) -> HealthReply:
        return HealthReply(status_code=200, body=b"upstream says hi", media_type="text/plain")

    provider = HealthProvider(OutputFormat.PROTO)
    provider.register("edge", redirect)
    app = create_app(Settings(services={SERVICE: None}, log_json=False), provider=provider)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test",
    ) as ac:
        forwarded = await ac.get("/health", params={"service": "edge"})
        local = await ac.get("/health", params={"service": SERVICE, "format": "mesg"})
    assert forwarded.text == "upstream says hi"
    assert local.text == "SERVING"


@pytest.mark.asyncio
async def test_health_auth_required() -> None:
    settings = Settings(
        output_format=OutputFormat.MESSAGE,
        services={SERVICE: None},
        auth_required=True,
        secret_key="app-secret",
        log_json=False,
    )
    app = create_app(settings)
    token = JWTManager.issue("status-page")
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test",
    ) as ac:
        denied = await ac.get("/health", params={"service": SERVICE})
        allowed = await ac.get(
            "/health", params={"service": SERVICE},
            headers={"Authorization": f"Bearer {token}"},
        )
    assert denied.status_code == 400
    assert allowed.status_code == 200
    assert allowed.text == "SERVING"


def test_configured_upstreams_are_registered() -> None:
    app = create_app(Settings(
        services={"local": None, "remote": "http://remote:8000/health"}, log_json=False,
    ))
    registry = app.state.health.registry
    assert registry.lookup("local") == (True, None)
    known, handler = registry.lookup("remote")
    assert known
    assert handler.url == "http://remote:8000/health"


@pytest.mark.asyncio
async def test_lifespan_closes_upstream_clients() -> None:
    """Configured upstreams share one HTTP client each, closed on shutdown."""
    app = create_app(Settings(
        services={"remote": "http://remote:8000/health"}, log_json=False,
    ))
    upstream = app.state.upstreams[0]
    async with AppFactory._lifespan(app):
        assert not upstream.is_closed
    assert upstream.is_closed
