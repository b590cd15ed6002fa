"""Fetch INFO commandstats reports from a live Redis-protocol server."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse, urlunparse

from rediscompat.config.schema import StatsConfig
from rediscompat.core.logging import emit_metric, get_logger


class StatsSourceError(RuntimeError):
    """Raised when the statistics report cannot be fetched."""


def render_commandstats(section: Mapping[str, Any]) -> str:
    """Render a parsed commandstats mapping back into INFO text.

    ``{"cmdstat_get": {"calls": 2, "usec": 5}}`` becomes
    ``"cmdstat_get:calls=2,usec=5"``; one line per command.
    """
    lines = ["# Commandstats"]
    for key, value in section.items():
        if isinstance(value, Mapping):
            rendered = ",".join(f"{field}={item}" for field, item in value.items())
        else:
            rendered = str(value)
        lines.append(f"{key}:{rendered}")
    return "\r\n".join(lines) + "\r\n"


def redact_redis_url(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.password:
        return url
    host = parsed.hostname or ""
    if parsed.port:
        host = f"{host}:{parsed.port}"
    user = parsed.username or ""
    return urlunparse(parsed._replace(netloc=f"{user}:***@{host}"))


class RedisStatsSource:
    def __init__(self, config: StatsConfig | None = None, *, client: Any | None = None) -> None:
        self.config = config or StatsConfig()
        self.logger = get_logger("rediscompat.services.stats")
        self._client = client

    def _connect(self) -> Any:
        if self._client is not None:
            return self._client
        import redis  # type: ignore[import-not-found]

        self._client = redis.Redis.from_url(
            self.config.redis_url,
            socket_connect_timeout=self.config.connect_timeout_seconds,
            socket_timeout=self.config.connect_timeout_seconds,
            decode_responses=True,
        )
        return self._client

    def fetch_commandstats(self) -> str:
        safe_url = redact_redis_url(self.config.redis_url)
        try:
            section = self._connect().info("commandstats")
        except Exception as exc:
            if self.config.required:
                raise StatsSourceError(f"failed to fetch commandstats from {safe_url}: {exc}") from exc
            self.logger.warning(
                "stats server unavailable, continuing with an empty commandstats report",
                extra={
                    "service": "stats",
                    "event_action": "commandstats_fetch",
                    "event_outcome": "failure",
                    "payload": {"redis_url": safe_url, "error": str(exc)},
                },
            )
            return render_commandstats({})
        if not isinstance(section, Mapping):
            raise StatsSourceError(f"unexpected commandstats payload from {safe_url}")
        emit_metric(
            self.logger,
            name="commandstats_commands",
            value=len(section),
            service="stats",
            payload={"redis_url": safe_url},
        )
        return render_commandstats(section)

    def close(self) -> None:
        if self._client is not None:
            close = getattr(self._client, "close", None)
            if callable(close):
                close()
            self._client = None
