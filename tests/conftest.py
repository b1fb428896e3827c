"""Shared fixtures for svc_health tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
from grpc_health.v1 import health_pb2

from svc_health.app import create_app
from svc_health.config import Settings
from svc_health.models.health import HealthRequest, OutputFormat
from svc_health.resources.health import HealthProvider
from svc_health.utils.codec import HealthCodec

SERVICE = "my-service"


@pytest.fixture()
def codec() -> HealthCodec:
    return HealthCodec()


@pytest.fixture()
def settings() -> Settings:
    """Test settings: JSON output, one locally served service."""
    return Settings(
        output_format=OutputFormat.JSON,
        services={SERVICE: None},
        secret_key="test-secret-key",
        log_level="WARNING",
        log_json=False,
    )


@pytest.fixture()
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client wired to the test app."""
    app = create_app(settings)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


def body_request(name: str, **query: str) -> HealthRequest:
    """A health request whose binary body asks about ``name``."""
    body = health_pb2.HealthCheckRequest(service=name).SerializeToString()
    return HealthRequest(method="POST", query=query, body=body)


def query_request(**query: str) -> HealthRequest:
    """A bodiless health request driven by query parameters."""
    return HealthRequest(method="GET", query=query)


def proto_status(body: bytes) -> int:
    """Decode a binary check response and return its status."""
    return health_pb2.HealthCheckResponse.FromString(body).status


async def serve(provider: HealthProvider, request: HealthRequest):
    """Run ``request`` through a freshly built handler."""
    return await provider.build_handler()(request)
