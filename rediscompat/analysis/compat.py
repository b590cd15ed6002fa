"""Compatibility annotation of command names against the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rediscompat.catalog import CommandCatalog, default_catalog


SUPPORTED = "Supported"
UNSUPPORTED = "Unsupported"


@dataclass(frozen=True, slots=True)
class CompatAnnotation:
    name: str
    min_version: str
    compat_detected: str
    known: bool = True

    @property
    def supported(self) -> bool:
        return self.compat_detected == SUPPORTED

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "min_version": self.min_version,
            "compat_detected": self.compat_detected,
        }


def annotate_with_versions(
    names: Iterable[str],
    catalog: CommandCatalog | None = None,
) -> list[CompatAnnotation]:
    """Pair each name with its introduction version and support status.

    One annotation per input, in input order. Names missing from the
    catalog get ``UNSUPPORTED`` for both fields.
    """
    source = catalog if catalog is not None else default_catalog()
    annotations: list[CompatAnnotation] = []
    for name in names:
        record = source.lookup(name)
        if record is None:
            annotations.append(
                CompatAnnotation(name=name, min_version=UNSUPPORTED, compat_detected=UNSUPPORTED, known=False)
            )
            continue
        annotations.append(
            CompatAnnotation(
                name=name,
                min_version=record.since,
                compat_detected=SUPPORTED if record.compat_supported else UNSUPPORTED,
            )
        )
    return annotations
