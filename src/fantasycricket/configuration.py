from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Sequence

import yaml
from pydantic import BaseModel, Field

from .config import get_config
from .errors import ConfigurationError
from .sources.base import (
    DEFAULT_ALTERNATIVE_ENDPOINTS,
    DEFAULT_SOURCES,
    HTTPDataSource,
    SourceDefinition,
    SourceRegistry,
)
from .sources.common import AsyncHTTPClient, default_headers

logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = "FANTASYCRICKET_ENV"
EXTRA_CONFIG_VARIABLE = "FANTASYCRICKET_SOURCES_CONFIG"
ENV_OVERRIDE_PREFIX = "FANTASYCRICKET__"

_BUNDLED_CONFIG = Path(__file__).resolve().parents[2] / "config" / "sources.yaml"


class SourceConfig(BaseModel):
    """One entry of the ordered source registry."""

    name: str
    endpoint: str
    kind: str = "public"
    enabled: bool = True
    alternatives: list[str] | None = None


class RuntimeConfig(BaseModel):
    """Timeouts and the acquisition window."""

    timeout_seconds: float = 10.0
    window_hours: float = 48.0
    user_agent: str = "Fantasy-Cricket-Bot/1.0"


class LookupConfig(BaseModel):
    """Endpoints used while building squads and venue conditions."""

    names_enabled: bool = True
    weather_enabled: bool = True
    names_endpoint: str = "https://randomuser.me/api/"
    weather_endpoints: list[str] = Field(
        default_factory=lambda: [
            "https://api.openweathermap.org/data/2.5/weather?q={city}&units=metric",
            "https://wttr.in/{city}?format=j1",
            "https://api.weatherapi.com/v1/current.json?q={city}",
        ]
    )


def _default_sources() -> list[SourceConfig]:
    return [
        SourceConfig(name=item.name, endpoint=item.endpoint, kind=item.kind)
        for item in DEFAULT_SOURCES
    ]


class CricketConfig(BaseModel):
    """Aggregate configuration for acquisition and lookups."""

    environment: str = "default"
    sources: list[SourceConfig] = Field(default_factory=_default_sources)
    alternative_endpoints: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALTERNATIVE_ENDPOINTS)
    )
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    lookups: LookupConfig = Field(default_factory=LookupConfig)

    def definitions(self) -> list[SourceDefinition]:
        """Enabled sources in priority order as :class:`SourceDefinition`."""

        return [
            SourceDefinition(
                name=source.name,
                endpoint=source.endpoint,
                kind=source.kind,
                alternatives=tuple(
                    self.alternative_endpoints
                    if source.alternatives is None
                    else source.alternatives
                ),
            )
            for source in self.sources
            if source.enabled
        ]


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Configuration at {path} must be a mapping")
    return dict(data)


def _merge_layers(base: Dict[str, Any], layer: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in layer.items():
        if (
            key in merged
            and isinstance(merged[key], Mapping)
            and isinstance(value, Mapping)
        ):
            merged[key] = _merge_layers(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def _resolve_env_tokens(value: Any) -> Any:
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda match: os.getenv(match.group(1), ""), value)
    if isinstance(value, Mapping):
        return {k: _resolve_env_tokens(v) for k, v in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_resolve_env_tokens(item) for item in value]
    return value


def _coerce_env_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        lowered = raw.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        return raw


def _set_nested(mapping: MutableMapping[str, Any], path: Iterable[str], value: Any) -> None:
    segments = list(path)
    if not segments:
        return
    head, *tail = segments
    key = head.lower().replace("-", "_")
    if not tail:
        mapping[key] = value
        return
    child = mapping.get(key)
    if not isinstance(child, MutableMapping):
        child = {}
    else:
        child = dict(child)
    mapping[key] = child
    _set_nested(child, tail, value)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    updated = dict(data)
    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_OVERRIDE_PREFIX):
            continue
        suffix = key[len(ENV_OVERRIDE_PREFIX) :]
        path = [segment for segment in suffix.split("__") if segment]
        if not path:
            continue
        _set_nested(updated, path, _coerce_env_value(raw_value))
    return updated


def default_config_path() -> Path | None:
    """User config directory first, then the file bundled with the repo."""

    user_path = get_config().config_dir / "sources.yaml"
    if user_path.exists():
        return user_path
    if _BUNDLED_CONFIG.exists():
        return _BUNDLED_CONFIG
    return None


def load_cricket_config(
    *,
    base_path: str | os.PathLike[str] | None = None,
    environment: str | None = None,
    extra_paths: Sequence[str | os.PathLike[str]] | None = None,
) -> CricketConfig:
    """Load layered configuration for the source registry.

    The loader merges ``sources.yaml`` with an optional environment-specific
    overlay (``sources.<env>.yaml``), additional override files, and
    environment variable overrides that use the ``FANTASYCRICKET__`` prefix.
    Without an explicit ``base_path`` and without any file on disk the
    built-in source list is used.
    """

    config_path = Path(base_path) if base_path else default_config_path()
    data: Dict[str, Any] = _load_yaml(config_path) if config_path else {}

    env_name = environment or os.getenv(ENVIRONMENT_VARIABLE) or data.get("environment")
    if isinstance(env_name, str):
        if config_path is not None:
            env_path = config_path.with_name(
                f"{config_path.stem}.{env_name}{config_path.suffix}"
            )
            if env_path.exists():
                data = _merge_layers(data, _load_yaml(env_path))
        data["environment"] = env_name

    merged = dict(data)
    override_sources: list[Path] = []
    if extra_paths:
        override_sources.extend(Path(path) for path in extra_paths)
    env_overrides = os.getenv(EXTRA_CONFIG_VARIABLE)
    if env_overrides:
        override_sources.extend(Path(token) for token in env_overrides.split(os.pathsep) if token)

    for override in override_sources:
        if override.exists():
            merged = _merge_layers(merged, _load_yaml(override))
        else:
            logger.warning("Ignoring missing configuration override %s", override)

    merged = _apply_env_overrides(merged)
    merged = _resolve_env_tokens(merged)

    return CricketConfig.model_validate(merged)


def validate_cricket_config(config: CricketConfig) -> list[str]:
    """Validate a :class:`CricketConfig` instance.

    Returns a list of warning messages and raises
    :class:`ConfigurationError` when fatal issues are found.
    """

    errors: list[str] = []
    warnings: list[str] = []

    if not config.sources:
        errors.append("at least one source must be defined")
    else:
        if not any(source.enabled for source in config.sources):
            errors.append("all sources are disabled; enable at least one")
        seen: set[str] = set()
        for index, source in enumerate(config.sources):
            if not source.name.strip():
                errors.append(f"source #{index + 1} is missing a name")
            elif source.name in seen:
                errors.append(f"source '{source.name}' is defined more than once")
            seen.add(source.name)
            if not source.endpoint.strip():
                errors.append(f"source '{source.name}' is missing an endpoint")

    runtime = config.runtime
    if runtime.timeout_seconds <= 0:
        errors.append("runtime.timeout_seconds must be greater than zero")
    elif runtime.timeout_seconds > 60:
        warnings.append(
            "runtime.timeout_seconds is above 60 seconds; a full fallback scan may take minutes"
        )
    if runtime.window_hours <= 0:
        errors.append("runtime.window_hours must be greater than zero")
    if not runtime.user_agent.strip():
        errors.append("runtime.user_agent cannot be empty")

    if not config.alternative_endpoints:
        warnings.append("no alternative endpoints configured; sources have no mirrors")

    lookups = config.lookups
    if lookups.weather_enabled and not lookups.weather_endpoints:
        warnings.append(
            "lookups.weather_enabled is true but no weather endpoints are defined; "
            "conditions will always be generated"
        )
    for endpoint in lookups.weather_endpoints:
        if "{city}" not in endpoint:
            errors.append(f"weather endpoint '{endpoint}' must contain a '{{city}}' placeholder")

    if errors:
        bullet_list = "\n".join(f"- {message}" for message in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{bullet_list}")

    return warnings


def create_http_client(config: CricketConfig) -> AsyncHTTPClient:
    runtime = config.runtime
    return AsyncHTTPClient(
        timeout=runtime.timeout_seconds, headers=default_headers(runtime.user_agent)
    )


def create_registry_from_config(
    config: CricketConfig,
    *,
    client: AsyncHTTPClient | None = None,
) -> SourceRegistry:
    """Instantiate the ordered source registry defined in the configuration."""

    shared = client or create_http_client(config)
    return SourceRegistry(
        HTTPDataSource(
            definition,
            client=shared,
            timeout_seconds=config.runtime.timeout_seconds,
        )
        for definition in config.definitions()
    )


__all__ = [
    "CricketConfig",
    "LookupConfig",
    "RuntimeConfig",
    "SourceConfig",
    "create_http_client",
    "create_registry_from_config",
    "default_config_path",
    "load_cricket_config",
    "validate_cricket_config",
]
