"""Client-side helpers for calling a health check endpoint."""

from __future__ import annotations

import httpx

from svc_health.errors import UpstreamStatusError
from svc_health.models.health import FORMAT_KEY, SERVICE_KEY, CheckResult, OutputFormat
from svc_health.utils.codec import SERVING, HealthCodec


class HealthClient:
    """Builds check requests and reads check responses in one output format.

    The format must match what the server answers with, either its
    configured default or the ``format`` set by ``build_query_url``.
    """

    def __init__(
        self,
        output_format: OutputFormat = OutputFormat.PROTO,
        *,
        codec: HealthCodec | None = None,
    ) -> None:
        self._output_format = output_format
        self._codec = codec if codec is not None else HealthCodec()

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    def build_request(self, service: str, url: str) -> httpx.Request:
        """Build a POST to ``url`` whose body is a binary check request.

        Raises:
            InternalEncodingError: If the request cannot be serialized.
        """
        body = self._codec.encode_request(service)
        return httpx.Request(
            "POST", url, content=body,
            headers={"Content-Type": "application/x-protobuf"},
        )

    def build_query_url(self, service: str, base_url: str) -> str:
        """Set the ``service`` and ``format`` query parameters on ``base_url``."""
        url = httpx.URL(base_url).copy_merge_params({
            SERVICE_KEY: service,
            FORMAT_KEY: str(self._output_format),
        })
        return str(url)

    def decode_response(self, response: httpx.Response) -> str:
        """Read and close ``response`` and return the reported status name.

        Raises:
            UpstreamStatusError: If the response status is not 200.
            ResponseDecodeError: If the body does not parse in the output format.
        """
        try:
            body = response.read()
        finally:
            if not response.is_closed:
                response.close()
        if response.status_code != httpx.codes.OK:
            raise UpstreamStatusError(
                response.status_code,
                response.reason_phrase,
                body.decode(errors="replace"),
            )
        return self._codec.decode_response(body, self._output_format)

    def read_response(self, response: httpx.Response) -> CheckResult:
        """Like ``decode_response`` but also reports whether the service is serving."""
        status = self.decode_response(response)
        return CheckResult(serving=status == HealthCodec.status_name(SERVING), status=status)

    async def check(
        self, service: str, url: str, http_client: httpx.AsyncClient,
    ) -> CheckResult:
        """Send a check for ``service`` to ``url`` and read the result."""
        response = await http_client.send(self.build_request(service, url))
        return self.read_response(response)
