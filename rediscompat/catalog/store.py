"""Immutable command catalog and its bundled data source."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import yaml

from rediscompat.catalog.model import CatalogError, CommandRecord, canonical_name
from rediscompat.core.logging import get_logger


BUNDLED_CATALOG_PATH = Path(__file__).with_name("commands.yml")


class CommandCatalog:
    """Read-only mapping from canonical command identifier to record."""

    __slots__ = ("_records", "_revision")

    def __init__(self, records: Mapping[str, CommandRecord], *, revision: str = "") -> None:
        self._records: Mapping[str, CommandRecord] = MappingProxyType(dict(records))
        self._revision = revision

    @property
    def revision(self) -> str:
        return self._revision

    def lookup(self, name: str) -> CommandRecord | None:
        return self._records.get(canonical_name(name))

    def entries(self) -> Mapping[str, CommandRecord]:
        return self._records

    def names(self) -> list[str]:
        return list(self._records)

    def subcommands(self, parent: str) -> list[CommandRecord]:
        prefix = f"{canonical_name(parent)} "
        return [record for key, record in self._records.items() if key.startswith(prefix)]

    def groups(self) -> list[str]:
        seen: dict[str, None] = {}
        for record in self._records.values():
            if record.group:
                seen.setdefault(record.group, None)
        return list(seen)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_name(name) in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"CommandCatalog(size={len(self._records)}, revision={self._revision!r})"


def build_catalog(raw: Mapping[str, Any], *, revision: str = "") -> CommandCatalog:
    if not isinstance(raw, Mapping):
        raise CatalogError("catalog commands must be an object")
    records: dict[str, CommandRecord] = {}
    for name, payload in raw.items():
        record = CommandRecord.from_mapping(str(name), payload)
        if record.name in records:
            raise CatalogError(f"duplicate command identifier '{record.name}'")
        records[record.name] = record
    return CommandCatalog(records, revision=revision)


def load_catalog(path: Path) -> CommandCatalog:
    if not path.exists():
        raise FileNotFoundError(f"catalog file does not exist: {path}")
    with path.open("r", encoding="utf-8") as handle:
        document = yaml.safe_load(handle) or {}
    if not isinstance(document, dict):
        raise CatalogError(f"catalog file must contain an object: {path}")
    catalog = build_catalog(document.get("commands") or {}, revision=str(document.get("version", "")).strip())
    get_logger("rediscompat.catalog").info(
        "catalog loaded",
        extra={
            "service": "catalog",
            "payload": {"path": str(path), "commands": len(catalog), "revision": catalog.revision},
        },
    )
    return catalog


@lru_cache(maxsize=None)
def _cached_catalog(path: str) -> CommandCatalog:
    return load_catalog(Path(path))


def default_catalog(path: Path | None = None) -> CommandCatalog:
    """Return the process-wide catalog, loading it on first use.

    Each distinct source path is read once; later calls share the same
    instance.
    """
    source = (path or BUNDLED_CATALOG_PATH).resolve()
    return _cached_catalog(str(source))
