"""HealthCodec: gRPC health-checking messages on the wire."""

from __future__ import annotations

import json

from google.protobuf import json_format
from google.protobuf.message import DecodeError, EncodeError
from grpc_health.v1 import health_pb2

from svc_health.errors import BadRequestError, InternalEncodingError, ResponseDecodeError
from svc_health.models.health import OutputFormat

ServingStatus = health_pb2.HealthCheckResponse.ServingStatus

SERVING = health_pb2.HealthCheckResponse.SERVING
SERVICE_UNKNOWN = health_pb2.HealthCheckResponse.SERVICE_UNKNOWN


class HealthCodec:
    """Encode and decode ``HealthCheckRequest``/``HealthCheckResponse``.

    Requests always travel as binary protobuf. Responses use the output
    format negotiated for the call. Subclass to plug in another encoding.
    """

    @staticmethod
    def status_name(status: int) -> str:
        """Return the enum name of a serving status, e.g. ``"SERVING"``."""
        return ServingStatus.Name(status)

    def encode_request(self, service: str) -> bytes:
        """Serialize a check request for ``service``.

        Raises:
            InternalEncodingError: If the message cannot be serialized.
        """
        try:
            return health_pb2.HealthCheckRequest(service=service).SerializeToString()
        except (EncodeError, ValueError) as error:
            raise InternalEncodingError(f"could not marshal request: {error}") from error

    def decode_request(self, body: bytes) -> str:
        """Parse a binary check request and return the service name.

        Raises:
            BadRequestError: If the body is not a valid request message.
        """
        request = health_pb2.HealthCheckRequest()
        try:
            request.ParseFromString(body)
        except DecodeError as error:
            raise BadRequestError(f"could not unmarshal request: {error}") from error
        return request.service

    def encode_response(self, status: int, output_format: OutputFormat) -> bytes:
        """Serialize a check response in ``output_format``.

        Raises:
            InternalEncodingError: If the response cannot be serialized.
        """
        if output_format is OutputFormat.MESSAGE:
            return self.status_name(status).encode()
        try:
            if output_format is OutputFormat.JSON:
                payload = {"status": self.status_name(status)}
                return json.dumps(payload, separators=(",", ":")).encode()
            return health_pb2.HealthCheckResponse(status=status).SerializeToString()
        except (EncodeError, ValueError) as error:
            raise InternalEncodingError(
                f"could not marshal response to {output_format}: {error}",
            ) from error

    def decode_response(self, body: bytes, output_format: OutputFormat) -> str:
        """Parse a check response body and return its status name.

        ``mesg`` bodies are returned as-is.

        Raises:
            ResponseDecodeError: If the body does not parse in ``output_format``.
        """
        if output_format is OutputFormat.MESSAGE:
            return body.decode(errors="replace")
        response = health_pb2.HealthCheckResponse()
        try:
            if output_format is OutputFormat.JSON:
                json_format.Parse(body, response)
            else:
                response.ParseFromString(body)
        except (DecodeError, json_format.ParseError, UnicodeDecodeError) as error:
            raise ResponseDecodeError(
                f"could not unmarshal {output_format} response: {error}",
            ) from error
        return self.status_name(response.status)
