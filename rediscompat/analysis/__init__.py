"""Derived queries over the command catalog."""

from .compat import SUPPORTED, UNSUPPORTED, CompatAnnotation, annotate_with_versions
from .report import CompatReport, build_compat_report
from .usage import CommandStat, normalize_command_name, parse_command_stats, parse_executed_command_names
from .versions import (
    DEFAULT_VERSION_POLICY,
    VERSION_POLICIES,
    distinct_versions,
    filter_by_version,
    latest_version,
    resolve_version_policy,
    sort_versions,
)

__all__ = [
    "SUPPORTED",
    "UNSUPPORTED",
    "CompatAnnotation",
    "CompatReport",
    "CommandStat",
    "DEFAULT_VERSION_POLICY",
    "VERSION_POLICIES",
    "annotate_with_versions",
    "build_compat_report",
    "distinct_versions",
    "filter_by_version",
    "latest_version",
    "normalize_command_name",
    "parse_command_stats",
    "parse_executed_command_names",
    "resolve_version_policy",
    "sort_versions",
]
