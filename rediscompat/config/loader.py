"""Config loading and initialization."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Any

import yaml

from rediscompat.config.schema import AppConfig, parse_config


DEFAULT_CONFIG_PATH = Path(__file__).with_name("defaults.yml")
_ENV_TOKEN_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")


def load_config(path: Path | None = None) -> AppConfig:
    source = path or DEFAULT_CONFIG_PATH
    if not source.exists():
        raise FileNotFoundError(f"config file does not exist: {source}")
    with source.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config file must contain an object: {source}")
    config = parse_config(_interpolate_env(raw))
    if config.catalog.path and not Path(config.catalog.path).is_absolute():
        # Relative catalog paths are anchored at the config file.
        config.catalog.path = str((source.parent / config.catalog.path).resolve())
    return config


def initialize_config(path: Path, force: bool = False) -> Path:
    if path.exists() and not force:
        raise FileExistsError(f"config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(DEFAULT_CONFIG_PATH, path)
    return path


def _interpolate_env(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _interpolate_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    if not isinstance(value, str) or "${" not in value:
        return value

    def _replace(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        resolved = os.environ.get(name)
        if resolved is not None:
            return resolved
        if default is not None:
            return default
        raise ValueError(f"missing required environment variable '{name}' referenced by '{match.group(0)}'")

    return _ENV_TOKEN_RE.sub(_replace, value)
