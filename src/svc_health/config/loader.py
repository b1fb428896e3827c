"""ConfigLoader: per-environment YAML for the health service, env vars on top."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from svc_health.config.settings import ENV_PREFIX, Settings

_CONFIG_ROOT = Path(__file__).resolve().parent

ENV_VAR = f"{ENV_PREFIX}ENV"
CONFIG_FILE_VAR = f"{ENV_PREFIX}CONFIG_FILE"


class ConfigLoader:
    """Layer overrides, environment variables, YAML and defaults into Settings.

    The YAML file is ``config/<SVC_HEALTH_ENV>/settings.yaml`` (``dev`` when
    unset) or the path in ``SVC_HEALTH_CONFIG_FILE``. Its ``services`` block
    maps each service to an upstream health URL, or to null to answer locally.
    """

    @staticmethod
    def config_path(env: str | None = None) -> Path:
        """Path of the YAML file that applies to ``env``."""
        explicit = os.environ.get(CONFIG_FILE_VAR)
        if explicit:
            return Path(explicit)
        env = env or os.environ.get(ENV_VAR, "dev")
        return _CONFIG_ROOT / env / "settings.yaml"

    @staticmethod
    def _load_yaml(path: Path) -> dict[str, Any]:
        """Read ``path``. A missing file is empty; a non-mapping file is an error."""
        if not path.exists():
            return {}
        with path.open() as config_file:
            data = yaml.safe_load(config_file)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at top level")
        return data

    @staticmethod
    def _check_services(value: Any, source: str) -> dict[str, str | None]:
        """Validate a ``services`` block: names to URL strings or null."""
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError(f"{source}: 'services' must map service names to URLs or null")
        services: dict[str, str | None] = {}
        for name, url in value.items():
            if url is not None and not isinstance(url, str):
                raise ValueError(
                    f"{source}: upstream for service {name!r} must be a URL or null",
                )
            services[str(name)] = url
        return services

    @staticmethod
    def load_settings(**overrides: Any) -> Settings:
        """Build Settings with priority: overrides > env vars > YAML > defaults.

        Every YAML key shadowed by an environment variable is dropped,
        ``services`` included, since pydantic-settings ranks constructor
        kwargs above the environment.

        Raises:
            ValueError: If the YAML file or its ``services`` block is malformed.
        """
        path = ConfigLoader.config_path()
        file_values = ConfigLoader._load_yaml(path)
        if "services" in file_values:
            file_values["services"] = ConfigLoader._check_services(
                file_values["services"], str(path),
            )
        layered = {
            key: value for key, value in file_values.items()
            if f"{ENV_PREFIX}{key.upper()}" not in os.environ
        }
        if "services" in overrides:
            overrides["services"] = ConfigLoader._check_services(
                overrides["services"], "overrides",
            )
        return Settings(**{**layered, **overrides})
