"""CLI entry point for rediscompat."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, Sequence

from rediscompat.analysis import (
    annotate_with_versions,
    build_compat_report,
    distinct_versions,
    filter_by_version,
    parse_command_stats,
    parse_executed_command_names,
)
from rediscompat.catalog import CommandCatalog, default_catalog
from rediscompat.config.loader import DEFAULT_CONFIG_PATH, initialize_config, load_config
from rediscompat.config.schema import AppConfig, StatsConfig
from rediscompat.core.logging import configure_logging
from rediscompat.services.stats import RedisStatsSource, StatsSourceError


DEFAULT_CONFIG = DEFAULT_CONFIG_PATH
POLICY_CHOICES = ["lexicographic", "semantic"]


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _bootstrap(config_path: Path) -> tuple[AppConfig, CommandCatalog]:
    config = load_config(config_path)
    configure_logging(config.logging)
    catalog_path = Path(config.catalog.path) if config.catalog.path else None
    return config, default_catalog(catalog_path)


def _add_stats_input(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, default=None, help="Read an INFO commandstats report from this file ('-' for stdin)")
    source.add_argument("--redis-url", type=str, default=None, help="Fetch INFO commandstats from this live server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rediscompat")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create starter config")
    init_parser.add_argument("--config", type=Path, default=Path("./config/rediscompat.yml"))
    init_parser.add_argument("--force", action="store_true")

    lookup_parser = subparsers.add_parser("lookup", help="Show the catalog record for one command")
    lookup_parser.add_argument("name", nargs="+", help="Command name, e.g. GET or CLIENT LIST")
    lookup_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    versions_parser = subparsers.add_parser("versions", help="List distinct introduction versions in the catalog")
    versions_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    filter_parser = subparsers.add_parser("filter", help="List commands introduced at or before a version")
    filter_parser.add_argument("threshold", type=str)
    filter_parser.add_argument("--policy", type=str, choices=POLICY_CHOICES, default=None)
    filter_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    annotate_parser = subparsers.add_parser("annotate", help="Annotate command names with version and support status")
    annotate_parser.add_argument("names", nargs="+")
    annotate_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    usage_parser = subparsers.add_parser("usage", help="Extract executed command names from a commandstats report")
    _add_stats_input(usage_parser)
    usage_parser.add_argument(
        "--details",
        action="store_true",
        help="Include per-command call counters instead of bare names",
    )
    usage_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    report_parser = subparsers.add_parser("report", help="Build a compatibility report from a commandstats report")
    _add_stats_input(report_parser)
    report_parser.add_argument("--policy", type=str, choices=POLICY_CHOICES, default=None)
    report_parser.add_argument("--output", type=Path, default=None, help="Write report JSON to this file path")
    report_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    serve_parser = subparsers.add_parser("serve", help="Serve the read-only HTTP API")
    serve_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def _read_stats(config: AppConfig, *, input_path: Path | None, redis_url: str | None) -> str:
    if input_path is not None:
        if str(input_path) == "-":
            return sys.stdin.read()
        try:
            return input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StatsSourceError(f"failed to read commandstats from {input_path}: {exc}") from exc
    stats_config = StatsConfig(
        redis_url=redis_url or config.stats.redis_url,
        connect_timeout_seconds=config.stats.connect_timeout_seconds,
        required=config.stats.required,
    )
    source = RedisStatsSource(stats_config)
    try:
        return source.fetch_commandstats()
    finally:
        source.close()


def cmd_init(config_path: Path, force: bool) -> int:
    initialize_config(config_path, force=force)
    _print({"config": str(config_path)})
    return 0


def cmd_lookup(config_path: Path, name: str) -> int:
    _, catalog = _bootstrap(config_path)
    record = catalog.lookup(name)
    if record is None:
        _print({"error": f"unknown command '{name}'"})
        return 1
    _print(record.to_dict())
    return 0


def cmd_versions(config_path: Path) -> int:
    _, catalog = _bootstrap(config_path)
    _print({"versions": distinct_versions(catalog)})
    return 0


def cmd_filter(config_path: Path, threshold: str, *, policy: str | None) -> int:
    config, catalog = _bootstrap(config_path)
    effective_policy = policy or config.versions.policy
    names = filter_by_version(threshold, catalog, policy=effective_policy)
    _print({"threshold": threshold, "policy": effective_policy, "count": len(names), "commands": names})
    return 0


def cmd_annotate(config_path: Path, names: list[str]) -> int:
    _, catalog = _bootstrap(config_path)
    _print({"commands": [item.to_dict() for item in annotate_with_versions(names, catalog)]})
    return 0


def cmd_usage(config_path: Path, *, input_path: Path | None, redis_url: str | None, details: bool) -> int:
    config, _ = _bootstrap(config_path)
    try:
        stats = _read_stats(config, input_path=input_path, redis_url=redis_url)
    except StatsSourceError as exc:
        _print({"error": str(exc)})
        return 1
    if details:
        _print({"commands": [item.to_dict() for item in parse_command_stats(stats)]})
        return 0
    names = parse_executed_command_names(stats)
    _print({"count": len(names), "commands": names})
    return 0


def cmd_report(
    config_path: Path,
    *,
    input_path: Path | None,
    redis_url: str | None,
    policy: str | None,
    output: Path | None,
) -> int:
    config, catalog = _bootstrap(config_path)
    try:
        stats = _read_stats(config, input_path=input_path, redis_url=redis_url)
    except StatsSourceError as exc:
        _print({"error": str(exc)})
        return 1
    report = build_compat_report(stats, catalog, policy=policy or config.versions.policy)
    if output is None:
        _print(report.to_dict())
        return 0
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(report.to_dict(), indent=2) + "\n", encoding="utf-8")
    _print({"output": str(output), "format": "json"})
    return 0


def cmd_serve(config_path: Path, *, host: str | None, port: int | None) -> int:
    config, catalog = _bootstrap(config_path)
    try:
        from rediscompat.dashboard.api import create_app
        import uvicorn
    except Exception as exc:
        raise RuntimeError("api dependencies are missing; install with 'rediscompat[api]'") from exc

    app = create_app(catalog, config)
    uvicorn.run(
        app,
        host=host or config.api.host,
        port=int(port or config.api.port),
        log_level=config.logging.level.lower(),
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        try:
            return cmd_init(args.config, args.force)
        except FileExistsError as exc:
            _print({"error": str(exc)})
            return 1
    if args.command == "lookup":
        return cmd_lookup(args.config, " ".join(args.name))
    if args.command == "versions":
        return cmd_versions(args.config)
    if args.command == "filter":
        return cmd_filter(args.config, args.threshold, policy=args.policy)
    if args.command == "annotate":
        return cmd_annotate(args.config, list(args.names))
    if args.command == "usage":
        return cmd_usage(args.config, input_path=args.input, redis_url=args.redis_url, details=args.details)
    if args.command == "report":
        return cmd_report(
            args.config,
            input_path=args.input,
            redis_url=args.redis_url,
            policy=args.policy,
            output=args.output,
        )
    if args.command == "serve":
        return cmd_serve(args.config, host=args.host, port=args.port)

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
