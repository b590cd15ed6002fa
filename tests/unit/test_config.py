from pathlib import Path

import pytest

from rediscompat.config.loader import DEFAULT_CONFIG_PATH, initialize_config, load_config
from rediscompat.config.schema import parse_config


def test_load_defaults() -> None:
    config = load_config(Path("rediscompat/config/defaults.yml"))
    assert config.environment == "development"
    assert config.catalog.path is None
    assert config.versions.policy == "lexicographic"
    assert config.stats.connect_timeout_seconds == 2.0
    assert config.stats.required is True
    assert config.api.docs_enabled is False
    assert config.api.port == 8099
    assert config.api.trusted_hosts == ["*"]
    assert config.logging.fmt == "ecs_json"
    assert config.logging.sink == "stdout"


def test_load_config_without_path_uses_bundled_defaults() -> None:
    assert load_config().versions.policy == load_config(DEFAULT_CONFIG_PATH).versions.policy


def test_stats_url_interpolates_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDISCOMPAT_REDIS_URL", "redis://cache.internal:6380/2")
    config = load_config(DEFAULT_CONFIG_PATH)
    assert config.stats.redis_url == "redis://cache.internal:6380/2"


def test_stats_url_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REDISCOMPAT_REDIS_URL", raising=False)
    config = load_config(DEFAULT_CONFIG_PATH)
    assert config.stats.redis_url == "redis://localhost:6379/0"


def test_missing_required_environment_variable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RC_MISSING_URL", raising=False)
    path = tmp_path / "config.yml"
    path.write_text("stats:\n  redis_url: ${RC_MISSING_URL}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="RC_MISSING_URL"):
        load_config(path)


def test_relative_catalog_path_is_anchored_at_config(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("catalog:\n  path: data/commands.yml\n", encoding="utf-8")
    config = load_config(path)
    assert config.catalog.path == str((tmp_path / "data" / "commands.yml").resolve())


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_initialize_config_refuses_overwrite(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "rediscompat.yml"
    assert initialize_config(path) == path
    assert path.read_text(encoding="utf-8") == DEFAULT_CONFIG_PATH.read_text(encoding="utf-8")
    with pytest.raises(FileExistsError):
        initialize_config(path)
    initialize_config(path, force=True)


def test_parse_config_empty_uses_defaults() -> None:
    config = parse_config({})
    assert config.versions.policy == "lexicographic"
    assert config.logging.level == "INFO"
    assert config.api.cors_allow_origins == ["http://127.0.0.1:3000", "http://localhost:3000"]


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ({"versions": {"policy": "calendar"}}, "version policy"),
        ({"logging": {"level": "LOUD"}}, "log level"),
        ({"logging": {"sink": "kafka"}}, "log sink"),
        ({"stats": {"connect_timeout_seconds": 0}}, "connect_timeout_seconds"),
        ({"stats": {"redis_url": "http://localhost"}}, "redis_url"),
        ({"stats": {"required": "maybe"}}, "stats.required"),
        ({"api": {"port": 70000}}, "port"),
        ({"api": {"trusted_hosts": []}}, "trusted_hosts"),
        ({"api": "enabled"}, "'api' must be an object"),
    ],
)
def test_parse_config_rejects_invalid_values(data: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_config(data)


def test_semantic_policy_is_accepted() -> None:
    assert parse_config({"versions": {"policy": "Semantic"}}).versions.policy == "semantic"
