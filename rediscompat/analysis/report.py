"""Compatibility report for the commands a server has executed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rediscompat.analysis.compat import CompatAnnotation, annotate_with_versions
from rediscompat.analysis.usage import normalize_command_name, parse_executed_command_names
from rediscompat.analysis.versions import VersionPolicy, latest_version
from rediscompat.catalog import CommandCatalog, default_catalog


@dataclass(slots=True)
class CompatReport:
    executed: list[str] = field(default_factory=list)
    annotations: list[CompatAnnotation] = field(default_factory=list)
    required_version: str | None = None
    catalog_revision: str = ""

    @property
    def supported(self) -> list[str]:
        return [item.name for item in self.annotations if item.supported]

    @property
    def unsupported(self) -> list[str]:
        return [item.name for item in self.annotations if not item.supported]

    @property
    def unknown(self) -> list[str]:
        return [item.name for item in self.annotations if not item.known]

    @property
    def fully_compatible(self) -> bool:
        return not self.unsupported

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalog_revision": self.catalog_revision,
            "executed": list(self.executed),
            "commands": [item.to_dict() for item in self.annotations],
            "summary": {
                "total": len(self.annotations),
                "supported": len(self.supported),
                "unsupported": len(self.unsupported),
                "unknown": len(self.unknown),
                "fully_compatible": self.fully_compatible,
                "required_version": self.required_version,
            },
            "unsupported": self.unsupported,
            "unknown": self.unknown,
        }


def build_compat_report(
    stats: str,
    catalog: CommandCatalog | None = None,
    *,
    policy: str | VersionPolicy | None = None,
) -> CompatReport:
    source = catalog if catalog is not None else default_catalog()
    executed = parse_executed_command_names(stats)
    unique: dict[str, None] = {}
    for raw_name in executed:
        unique.setdefault(normalize_command_name(raw_name), None)
    annotations = annotate_with_versions(list(unique), source)
    required_version = latest_version(
        [item.min_version for item in annotations if item.known],
        policy,
    )
    return CompatReport(
        executed=executed,
        annotations=annotations,
        required_version=required_version,
        catalog_revision=source.revision,
    )
