"""Version-threshold filtering and distinct version enumeration."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Callable, Iterable

from rediscompat.catalog import CommandCatalog, default_catalog


VersionPolicy = Callable[[str, str], bool]

DEFAULT_VERSION_POLICY = "lexicographic"


def lexicographic_at_or_before(since: str, threshold: str) -> bool:
    """Plain string comparison, so "10.0.0" sorts before "2.0.0"."""
    return since <= threshold


def _semantic_key(version: str) -> list[tuple[int, int | str]]:
    key: list[tuple[int, int | str]] = []
    for segment in version.strip().split("."):
        if segment.isdigit():
            key.append((0, int(segment)))
        else:
            key.append((1, segment))
    return key


def compare_semantic(left: str, right: str) -> int:
    left_key = _semantic_key(left)
    right_key = _semantic_key(right)
    width = max(len(left_key), len(right_key))
    left_key.extend([(0, 0)] * (width - len(left_key)))
    right_key.extend([(0, 0)] * (width - len(right_key)))
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def semantic_at_or_before(since: str, threshold: str) -> bool:
    return compare_semantic(since, threshold) <= 0


VERSION_POLICIES: dict[str, VersionPolicy] = {
    "lexicographic": lexicographic_at_or_before,
    "semantic": semantic_at_or_before,
}


def resolve_version_policy(policy: str | VersionPolicy | None) -> VersionPolicy:
    if policy is None:
        return VERSION_POLICIES[DEFAULT_VERSION_POLICY]
    if callable(policy):
        return policy
    normalized = str(policy).strip().lower()
    if normalized not in VERSION_POLICIES:
        raise ValueError(f"unknown version policy '{policy}'; expected one of: {', '.join(sorted(VERSION_POLICIES))}")
    return VERSION_POLICIES[normalized]


def filter_by_version(
    threshold: str,
    catalog: CommandCatalog | None = None,
    *,
    policy: str | VersionPolicy | None = None,
) -> list[str]:
    qualifies = resolve_version_policy(policy)
    source = catalog if catalog is not None else default_catalog()
    return [name for name, record in source.entries().items() if qualifies(record.since, threshold)]


def distinct_versions(catalog: CommandCatalog | None = None) -> list[str]:
    source = catalog if catalog is not None else default_catalog()
    seen: dict[str, None] = {}
    for record in source.entries().values():
        seen.setdefault(record.since, None)
    return list(seen)


def sort_versions(values: Iterable[str], policy: str | VersionPolicy | None = None) -> list[str]:
    qualifies = resolve_version_policy(policy)

    def _compare(left: str, right: str) -> int:
        left_first = qualifies(left, right)
        right_first = qualifies(right, left)
        if left_first and right_first:
            return 0
        return -1 if left_first else 1

    return sorted(values, key=cmp_to_key(_compare))


def latest_version(values: Iterable[str], policy: str | VersionPolicy | None = None) -> str | None:
    ordered = sort_versions(values, policy)
    return ordered[-1] if ordered else None
