"""Dataclasses for top-level application config."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


DEFAULT_API_CORS_ALLOW_ORIGINS = [
    "http://127.0.0.1:3000",
    "http://localhost:3000",
]


@dataclass(slots=True)
class CatalogConfig:
    path: str | None = None


@dataclass(slots=True)
class VersionsConfig:
    policy: str = "lexicographic"


@dataclass(slots=True)
class StatsConfig:
    redis_url: str = "redis://localhost:6379/0"
    connect_timeout_seconds: float = 2.0
    required: bool = True


@dataclass(slots=True)
class APIConfig:
    docs_enabled: bool = False
    cors_allow_origins: list[str] = field(
        default_factory=lambda: list(DEFAULT_API_CORS_ALLOW_ORIGINS)
    )
    trusted_hosts: list[str] = field(default_factory=lambda: ["*"])
    host: str = "127.0.0.1"
    port: int = 8099


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    fmt: str = "ecs_json"
    sink: str = "stdout"
    file_path: str | None = None
    service_name: str = "rediscompat"


@dataclass(slots=True)
class AppConfig:
    environment: str = "development"
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    versions: VersionsConfig = field(default_factory=VersionsConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
VALID_LOG_FORMATS = {"json", "ecs_json"}
VALID_LOG_SINKS = {"stdout", "file"}
VALID_VERSION_POLICIES = {"lexicographic", "semantic"}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{name}' must be an object")
    return raw


def _parse_bool_value(raw: Any, *, field_name: str, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    if isinstance(raw, int) and raw in {0, 1}:
        return bool(raw)
    raise ValueError(f"'{field_name}' must be a boolean")


def _parse_string_list(raw: Any, *, field_name: str, default: list[str]) -> list[str]:
    source = default if raw is None else raw
    if not isinstance(source, list):
        raise ValueError(f"'{field_name}' must be a list")
    values: list[str] = []
    seen: set[str] = set()
    for item in source:
        normalized = str(item).strip()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        values.append(normalized)
    if not values:
        raise ValueError(f"'{field_name}' must contain at least one non-empty value")
    return values


def parse_config(data: dict[str, Any]) -> AppConfig:
    if not isinstance(data, dict):
        raise ValueError("config root must be an object")
    environment = str(data.get("environment", "development"))

    catalog_raw = _section(data, "catalog")
    catalog_path = str(catalog_raw.get("path") or "").strip()
    catalog_config = CatalogConfig(path=catalog_path or None)

    versions_raw = _section(data, "versions")
    policy = str(versions_raw.get("policy", "lexicographic")).strip().lower()
    if policy not in VALID_VERSION_POLICIES:
        raise ValueError(f"invalid version policy '{policy}'")
    versions_config = VersionsConfig(policy=policy)

    stats_raw = _section(data, "stats")
    stats_timeout = float(stats_raw.get("connect_timeout_seconds", 2.0))
    if stats_timeout <= 0:
        raise ValueError("stats connect_timeout_seconds must be greater than zero")
    stats_config = StatsConfig(
        redis_url=str(stats_raw.get("redis_url", "redis://localhost:6379/0")).strip(),
        connect_timeout_seconds=stats_timeout,
        required=_parse_bool_value(stats_raw.get("required"), field_name="stats.required", default=True),
    )
    if not stats_config.redis_url.startswith(("redis://", "rediss://", "unix://")):
        raise ValueError("stats redis_url must use redis://, rediss:// or unix://")

    api_raw = _section(data, "api")
    api_port = int(api_raw.get("port", 8099))
    if api_port < 1 or api_port > 65535:
        raise ValueError("api port must be between 1 and 65535")
    api_config = APIConfig(
        docs_enabled=_parse_bool_value(api_raw.get("docs_enabled"), field_name="api.docs_enabled", default=False),
        cors_allow_origins=_parse_string_list(
            api_raw.get("cors_allow_origins"),
            field_name="api.cors_allow_origins",
            default=DEFAULT_API_CORS_ALLOW_ORIGINS,
        ),
        trusted_hosts=_parse_string_list(
            api_raw.get("trusted_hosts"),
            field_name="api.trusted_hosts",
            default=["*"],
        ),
        host=str(api_raw.get("host", "127.0.0.1")).strip() or "127.0.0.1",
        port=api_port,
    )

    logging_raw = _section(data, "logging")
    level = str(logging_raw.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"invalid log level '{level}'")
    log_format = str(logging_raw.get("format", "ecs_json"))
    if log_format not in VALID_LOG_FORMATS:
        raise ValueError(f"invalid log format '{log_format}'")
    sink = str(logging_raw.get("sink", "stdout"))
    if sink not in VALID_LOG_SINKS:
        raise ValueError(f"invalid log sink '{sink}'")
    logging_config = LoggingConfig(
        level=level,
        fmt=log_format,
        sink=sink,
        file_path=logging_raw.get("file_path"),
        service_name=str(logging_raw.get("service_name", "rediscompat")),
    )

    return AppConfig(
        environment=environment,
        catalog=catalog_config,
        versions=versions_config,
        stats=stats_config,
        api=api_config,
        logging=logging_config,
    )
