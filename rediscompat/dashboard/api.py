"""Read-only HTTP API over the command catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rediscompat.analysis import (
    annotate_with_versions,
    build_compat_report,
    distinct_versions,
    filter_by_version,
    parse_executed_command_names,
    resolve_version_policy,
)
from rediscompat.catalog import CommandCatalog, default_catalog
from rediscompat.config.schema import DEFAULT_API_CORS_ALLOW_ORIGINS, AppConfig
from rediscompat.core.logging import get_logger

try:
    from fastapi import Body, FastAPI, HTTPException, Query
    from fastapi.middleware.cors import CORSMiddleware
    from starlette.middleware.trustedhost import TrustedHostMiddleware
except Exception:  # pragma: no cover - optional dependency
    Body = None  # type: ignore[assignment]
    FastAPI = None  # type: ignore[assignment]
    HTTPException = RuntimeError  # type: ignore[assignment]
    Query = None  # type: ignore[assignment]
    CORSMiddleware = None  # type: ignore[assignment]
    TrustedHostMiddleware = None  # type: ignore[assignment]

_MAX_NAMES_PER_REQUEST = 10_000


def create_app(catalog: CommandCatalog | None = None, config: AppConfig | None = None) -> Any:
    if FastAPI is None or Query is None:
        raise RuntimeError("FastAPI is not installed. Install with: pip install 'rediscompat[api]'")

    app_config = config or AppConfig()
    if catalog is None:
        catalog_path = Path(app_config.catalog.path) if app_config.catalog.path else None
        catalog = default_catalog(catalog_path)
    default_policy = app_config.versions.policy
    api_config = app_config.api
    cors_allow_origins = [item for item in api_config.cors_allow_origins if item] or list(DEFAULT_API_CORS_ALLOW_ORIGINS)
    trusted_hosts = list(api_config.trusted_hosts) or ["*"]
    logger = get_logger("rediscompat.dashboard.api")

    app = FastAPI(
        title="rediscompat API",
        version="0.1.0",
        docs_url="/docs" if api_config.docs_enabled else None,
        redoc_url="/redoc" if api_config.docs_enabled else None,
        openapi_url="/openapi.json" if api_config.docs_enabled else None,
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def _policy(name: str | None) -> Any:
        try:
            return resolve_version_policy(name or default_policy)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    def _stats_text(payload: dict[str, Any]) -> str:
        stats = payload.get("stats", "")
        if not isinstance(stats, str):
            raise HTTPException(status_code=400, detail="'stats' must be a string")
        return stats

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "commands": len(catalog), "catalog_revision": catalog.revision}

    @app.get("/commands")
    def list_commands(
        since: str | None = Query(default=None, description="Only commands introduced at or before this version"),
        policy: str | None = Query(default=None),
    ) -> dict[str, Any]:
        if since is None:
            names = catalog.names()
        else:
            names = filter_by_version(since, catalog, policy=_policy(policy))
        return {"count": len(names), "commands": names}

    @app.get("/commands/{name}")
    def get_command(name: str) -> dict[str, Any]:
        record = catalog.lookup(name)
        if record is None:
            raise HTTPException(status_code=404, detail=f"unknown command '{name}'")
        return record.to_dict()

    @app.get("/versions")
    def versions() -> dict[str, Any]:
        return {"versions": distinct_versions(catalog)}

    @app.post("/usage")
    def usage(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        names = parse_executed_command_names(_stats_text(payload))
        return {"count": len(names), "commands": names}

    @app.post("/compat")
    def compat(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        names = payload.get("names", [])
        if not isinstance(names, list) or any(not isinstance(item, str) for item in names):
            raise HTTPException(status_code=400, detail="'names' must be a list of strings")
        if len(names) > _MAX_NAMES_PER_REQUEST:
            raise HTTPException(status_code=413, detail="too many names in one request")
        return {"commands": [item.to_dict() for item in annotate_with_versions(names, catalog)]}

    @app.post("/report")
    def report(
        payload: dict[str, Any] = Body(...),
        policy: str | None = Query(default=None),
    ) -> dict[str, Any]:
        result = build_compat_report(_stats_text(payload), catalog, policy=_policy(policy))
        logger.info(
            "compat report built",
            extra={
                "service": "api",
                "event_action": "compat_report",
                "payload": {
                    "commands": len(result.annotations),
                    "unsupported": len(result.unsupported),
                },
            },
        )
        return result.to_dict()

    return app
