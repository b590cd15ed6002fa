"""Structured JSON logging for the catalog, stats and API layers.

Callers pass context through ``extra``: ``service`` names the component
("catalog", "stats", "api"), ``payload`` carries a dict of details, and
``event_action`` / ``event_outcome`` / ``event_category`` describe the event.
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from pathlib import Path
import sys

from rediscompat.config.schema import LoggingConfig


ROOT_LOGGER = "rediscompat"
DEFAULT_LOG_FILE = "logs/rediscompat.log"


def _strip_empty(value: object) -> object | None:
    if isinstance(value, dict):
        kept = {key: _strip_empty(item) for key, item in value.items()}
        return {key: item for key, item in kept.items() if item is not None} or None
    if value in ("", None):
        return None
    return value


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds")


def _dumps(payload: dict[str, object]) -> str:
    return json.dumps(_strip_empty(payload) or {}, separators=(",", ":"), default=str)


class ECSJsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = ROOT_LOGGER) -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        component = getattr(record, "service", None)
        return _dumps(
            {
                "@timestamp": _timestamp(record),
                "message": record.getMessage(),
                "log": {"level": record.levelname.lower(), "logger": record.name},
                "service": {"name": self.service_name},
                "event": {
                    "category": getattr(record, "event_category", "process"),
                    "action": getattr(record, "event_action", None),
                    "outcome": getattr(record, "event_outcome", None),
                    "dataset": f"{self.service_name}.{component}" if component else None,
                },
                "error": {"message": self.formatException(record.exc_info) if record.exc_info else None},
                "rediscompat": {
                    "component": component,
                    "payload": getattr(record, "payload", None),
                },
            }
        )


class JsonFormatter(logging.Formatter):
    """Flat one-object-per-line JSON without the ECS nesting."""

    def format(self, record: logging.LogRecord) -> str:
        return _dumps(
            {
                "timestamp": _timestamp(record),
                "level": record.levelname.lower(),
                "logger": record.name,
                "message": record.getMessage(),
                "component": getattr(record, "service", None),
                "action": getattr(record, "event_action", None),
                "payload": getattr(record, "payload", None),
            }
        )


def _build_handler(config: LoggingConfig) -> logging.Handler:
    handler: logging.Handler
    if config.sink == "file":
        log_file = Path(config.file_path or DEFAULT_LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        # stdout is reserved for command output
        handler = logging.StreamHandler(sys.stderr)
    if config.fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(ECSJsonFormatter(service_name=config.service_name))
    return handler


def configure_logging(config: LoggingConfig, force: bool = False) -> None:
    """Attach the configured sink to the ``rediscompat`` logger once."""
    root = logging.getLogger(ROOT_LOGGER)
    if getattr(root, "_rediscompat_configured", False) and not force:
        return
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.setLevel(config.level)
    root.addHandler(_build_handler(config))
    root.propagate = False
    setattr(root, "_rediscompat_configured", True)


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)
    if name.startswith(ROOT_LOGGER) and logging.getLogger(ROOT_LOGGER).handlers:
        logger.propagate = True
        return logger
    # used before configure_logging: log standalone to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ECSJsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def emit_metric(
    logger: logging.Logger,
    *,
    name: str,
    value: float,
    service: str = "analysis",
    payload: dict[str, object] | None = None,
    level: str = "INFO",
) -> None:
    metric_name = name.strip() or "metric"
    details: dict[str, object] = {"metric_name": metric_name, "metric_value": float(value)}
    details.update(payload or {})
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        f"metric:{metric_name}",
        extra={
            "service": service,
            "event_category": "metric",
            "event_action": metric_name,
            "event_outcome": "success",
            "payload": details,
        },
    )
