"""Health provider: protocol-agnostic health check logic."""

from __future__ import annotations

from svc_health.auth.validator import Validator
from svc_health.errors import (
    BadRequestError,
    HealthCheckError,
    InternalEncodingError,
    ValidationError,
)
from svc_health.models.health import (
    FORMAT_KEY,
    MEDIA_TYPES,
    SERVICE_KEY,
    Handler,
    HealthReply,
    HealthRequest,
    OutputFormat,
)
from svc_health.services.registry import ServiceRegistry
from svc_health.utils.codec import SERVICE_UNKNOWN, SERVING, HealthCodec
from svc_health.utils.logging import get_logger


class HealthProvider:
    """Builds health check handlers over a registry of known services.

    Built once at startup. Services registered with a ``None`` handler are
    reported as SERVING; services registered with a handler have the check
    forwarded to it; anything else is SERVICE_UNKNOWN.
    """

    def __init__(
        self,
        output_format: OutputFormat = OutputFormat.PROTO,
        *,
        validator: Validator | None = None,
        codec: HealthCodec | None = None,
        registry: ServiceRegistry | None = None,
    ) -> None:
        self._output_format = output_format
        self._validator = validator
        self._codec = codec if codec is not None else HealthCodec()
        self._registry = registry if registry is not None else ServiceRegistry()
        self._log = get_logger(component="health_provider")

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    @property
    def registry(self) -> ServiceRegistry:
        return self._registry

    def register(self, service: str, handler: Handler | None = None) -> None:
        """Register ``service``. Pass ``None`` to answer without forwarding."""
        self._registry.register(service, handler)
        self._log.info("service_registered", service=service, forwarded=handler is not None)

    def build_handler(self) -> Handler:
        """Return a handler bound to this provider's registry and output format."""

        async def handle(request: HealthRequest) -> HealthReply:
            try:
                return await self._dispatch(request)
            except InternalEncodingError as error:
                self._log.error("health_encode_failed", error=str(error))
                return HealthReply.error(error.status_code, str(error))
            except HealthCheckError as error:
                self._log.warning(
                    "health_request_rejected",
                    status_code=error.status_code,
                    error=str(error),
                )
                return HealthReply.error(error.status_code, str(error))

        return handle

    def _resolve_format(self, request: HealthRequest) -> OutputFormat:
        """Configured format unless the query overrides it."""
        if FORMAT_KEY in request.query:
            return OutputFormat.parse(request.query[FORMAT_KEY])
        return self._output_format

    def _resolve_service(self, request: HealthRequest) -> str:
        """Service name from the binary body, falling back to the query."""
        if request.body:
            return self._codec.decode_request(request.body)
        if SERVICE_KEY in request.query:
            return request.query[SERVICE_KEY]
        raise BadRequestError("could not get service name in request body or url query")

    async def _dispatch(self, request: HealthRequest) -> HealthReply:
        if self._validator is not None:
            try:
                self._validator.validate(request)
            except HealthCheckError:
                raise
            except Exception as error:
                raise ValidationError(str(error)) from error

        output_format = self._resolve_format(request)
        service = self._resolve_service(request)

        known, redirect = self._registry.lookup(service)
        if redirect is not None:
            try:
                body = self._codec.encode_request(service)
            except InternalEncodingError as error:
                raise BadRequestError(str(error)) from error
            self._log.debug("health_check_forwarded", service=service)
            return await redirect(request.with_body(body))

        status = SERVING if known else SERVICE_UNKNOWN
        return HealthReply(
            status_code=200,
            body=self._codec.encode_response(status, output_format),
            media_type=MEDIA_TYPES[output_format],
        )
