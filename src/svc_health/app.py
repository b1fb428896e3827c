"""Litestar application factory and CLI entry point."""

from __future__ import annotations

import argparse
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from litestar import Litestar
from litestar.datastructures import State

from svc_health.auth.validator import JWTValidator, Validator
from svc_health.clients.health_client import HealthClient
from svc_health.clients.upstream import UpstreamHandler
from svc_health.config import ConfigLoader, Settings
from svc_health.controllers.health import HealthController
from svc_health.models.health import OutputFormat
from svc_health.resources.health import HealthProvider
from svc_health.utils.jwt import JWTManager
from svc_health.utils.logging import configure_logging, get_logger


class AppFactory:
    """Builds and configures the Litestar application. All methods are static."""

    @staticmethod
    def _build(settings: Settings, provider: HealthProvider | None = None) -> State:
        """Construct the object graph once.

        JWTManager.configure() (class-level) ─→ JWTValidator ─┐
        settings.services ─→ UpstreamHandler per URL ─────────┴→ HealthProvider
        HealthProvider.build_handler() → health_handler
        UpstreamHandlers are kept in state so the lifespan can close them.
        """
        if provider is None:
            validator: Validator | None = None
            if settings.auth_required:
                JWTManager.configure(
                    secret_key=settings.secret_key,
                    algorithm=settings.jwt_algorithm,
                    expire_minutes=settings.token_expire_minutes,
                    audience=settings.jwt_audience,
                )
                validator = JWTValidator()
            provider = HealthProvider(settings.output_format, validator=validator)
        upstreams: list[UpstreamHandler] = []
        for service, url in settings.services.items():
            if url is None:
                provider.register(service, None)
                continue
            upstream = UpstreamHandler(url, timeout=settings.upstream_timeout)
            upstreams.append(upstream)
            provider.register(service, upstream)
        return State({
            "health": provider,
            "health_handler": provider.build_handler(),
            "upstreams": upstreams,
        })

    @staticmethod
    @asynccontextmanager
    async def _lifespan(app: Litestar) -> AsyncIterator[None]:
        """Close pooled upstream HTTP clients on shutdown."""
        yield
        upstreams: list[UpstreamHandler] = app.state.upstreams
        for upstream in upstreams:
            await upstream.aclose()

    @staticmethod
    def create_app(
        settings: Settings | None = None,
        provider: HealthProvider | None = None,
    ) -> Litestar:
        """Create and configure the Litestar application.

        Pass ``provider`` to mount an existing provider (and its registry)
        instead of building one from settings.
        """
        if settings is None:
            settings = ConfigLoader.load_settings()
        configure_logging(settings.log_level, json=settings.log_json)
        state = AppFactory._build(settings, provider)
        get_logger(component="app").info(
            "health_app_created",
            output_format=str(state.health.output_format),
            services=state.health.registry.services(),
        )
        return Litestar(
            route_handlers=[HealthController],
            state=state,
            lifespan=[AppFactory._lifespan],
        )


# Public alias so conftest / uvicorn can call create_app() without knowing AppFactory.
create_app = AppFactory.create_app


class CLI:
    """Command-line interface for svc-health."""

    @staticmethod
    def _build_parser() -> argparse.ArgumentParser:
        """Build the CLI argument parser."""
        parser = argparse.ArgumentParser(
            prog="svc-health", description="Service health check CLI",
        )
        subparsers = parser.add_subparsers(dest="command")

        run_parser = subparsers.add_parser("run", help="Start the health server")
        run_parser.add_argument("--host", default="0.0.0.0")
        run_parser.add_argument("--port", type=int, default=8000)
        run_parser.add_argument("--reload", action="store_true", help="Auto-reload on file changes")

        check_parser = subparsers.add_parser("check", help="Check a service's health")
        check_parser.add_argument("service")
        check_parser.add_argument("url", help="Health endpoint, e.g. http://host:8000/health")
        check_parser.add_argument(
            "--format", choices=[str(fmt) for fmt in OutputFormat], default=None,
            help="Expected response format (defaults to configured output_format)",
        )
        check_parser.add_argument(
            "--query", action="store_true",
            help="Send a GET with query parameters instead of a POST body",
        )
        check_parser.add_argument("--token", default=None, help="Bearer token to send")
        check_parser.add_argument("--timeout", type=float, default=5.0)

        token_parser = subparsers.add_parser("token", help="Mint a bearer token")
        token_parser.add_argument("--subject", required=True, help="Calling service name")

        return parser

    @staticmethod
    def _check(args: argparse.Namespace, settings: Settings) -> int:
        """Run a single health check. Returns the process exit code."""
        output_format = (
            OutputFormat.parse(args.format) if args.format else settings.output_format
        )
        client = HealthClient(output_format)
        headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
        with httpx.Client(timeout=args.timeout, headers=headers) as http_client:
            if args.query:
                response = http_client.get(client.build_query_url(args.service, args.url))
            else:
                response = http_client.send(client.build_request(args.service, args.url))
            result = client.read_response(response)
        print(result.status)
        return 0 if result.serving else 1

    @staticmethod
    def _token(args: argparse.Namespace, settings: Settings) -> None:
        JWTManager.configure(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.token_expire_minutes,
            audience=settings.jwt_audience,
        )
        print(JWTManager.issue(args.subject))

    @staticmethod
    def main(argv: list[str] | None = None) -> None:
        """CLI entry point. Catches all exceptions and exits cleanly."""
        parser = CLI._build_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            sys.exit(1)

        try:
            if args.command == "run":
                import uvicorn

                uvicorn.run(
                    "svc_health.app:create_app",
                    factory=True,
                    host=args.host,
                    port=args.port,
                    reload=args.reload,
                )
            elif args.command == "check":
                sys.exit(CLI._check(args, ConfigLoader.load_settings()))
            elif args.command == "token":
                CLI._token(args, ConfigLoader.load_settings())
        except KeyboardInterrupt:
            pass
        except Exception as error:
            print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    CLI.main()
