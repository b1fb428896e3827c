"""Tests for HealthCodec."""

from __future__ import annotations

import pytest
from grpc_health.v1 import health_pb2

from svc_health.errors import BadRequestError, ResponseDecodeError
from svc_health.models.health import OutputFormat
from svc_health.utils.codec import SERVICE_UNKNOWN, SERVING, HealthCodec

# Field 1, length 5, only two bytes follow.
TRUNCATED = b"\x0a\x05ab"


def test_request_roundtrip(codec: HealthCodec) -> None:
    assert codec.decode_request(codec.encode_request("svc-a")) == "svc-a"


def test_encode_request_is_grpc_message(codec: HealthCodec) -> None:
    """Requests are plain grpc.health.v1 HealthCheckRequest bytes."""
    parsed = health_pb2.HealthCheckRequest.FromString(codec.encode_request("svc-a"))
    assert parsed.service == "svc-a"


def test_decode_truncated_request(codec: HealthCodec) -> None:
    with pytest.raises(BadRequestError, match="could not unmarshal request"):
        codec.decode_request(TRUNCATED)


def test_status_name() -> None:
    assert HealthCodec.status_name(SERVING) == "SERVING"
    assert HealthCodec.status_name(SERVICE_UNKNOWN) == "SERVICE_UNKNOWN"


def test_encode_json_response(codec: HealthCodec) -> None:
    """JSON responses are compact objects keyed by status name."""
    assert codec.encode_response(SERVING, OutputFormat.JSON) == b'{"status":"SERVING"}'


def test_encode_message_response(codec: HealthCodec) -> None:
    assert codec.encode_response(SERVICE_UNKNOWN, OutputFormat.MESSAGE) == b"SERVICE_UNKNOWN"


def test_encode_proto_response(codec: HealthCodec) -> None:
    body = codec.encode_response(SERVING, OutputFormat.PROTO)
    assert health_pb2.HealthCheckResponse.FromString(body).status == SERVING


@pytest.mark.parametrize("output_format", list(OutputFormat))
@pytest.mark.parametrize("status", [SERVING, SERVICE_UNKNOWN])
def test_response_roundtrip(codec: HealthCodec, output_format: OutputFormat, status: int) -> None:
    """decode(encode(x)) gives back the status name in every format."""
    body = codec.encode_response(status, output_format)
    assert codec.decode_response(body, output_format) == HealthCodec.status_name(status)


def test_decode_json_accepts_numeric_status(codec: HealthCodec) -> None:
    """Enum numbers are accepted as well as names."""
    assert codec.decode_response(b'{"status":1}', OutputFormat.JSON) == "SERVING"


def test_decode_bad_json(codec: HealthCodec) -> None:
    with pytest.raises(ResponseDecodeError):
        codec.decode_response(b"not json", OutputFormat.JSON)


def test_decode_bad_proto(codec: HealthCodec) -> None:
    with pytest.raises(ResponseDecodeError):
        codec.decode_response(TRUNCATED, OutputFormat.PROTO)
