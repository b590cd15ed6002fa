"""Executed-command extraction from INFO commandstats reports."""

from __future__ import annotations

from dataclasses import dataclass
import re


_CMDSTAT_MARKER_RE = re.compile(r"cmdstat_([^:]+):")
_CMDSTAT_LINE_RE = re.compile(r"^cmdstat_([^:\r\n]+):(.*?)\r?$", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class CommandStat:
    name: str
    calls: int = 0
    usec: int = 0
    usec_per_call: float = 0.0
    rejected_calls: int = 0
    failed_calls: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "calls": self.calls,
            "usec": self.usec,
            "usec_per_call": self.usec_per_call,
            "rejected_calls": self.rejected_calls,
            "failed_calls": self.failed_calls,
        }


def parse_executed_command_names(stats: str) -> list[str]:
    """Return every ``cmdstat_<name>:`` capture in order of occurrence.

    Duplicates are kept. Text without any marker yields an empty list. A
    capture runs to the next colon even across line breaks.
    """
    return _CMDSTAT_MARKER_RE.findall(stats or "")


def normalize_command_name(name: str) -> str:
    # INFO reports subcommands as "parent|child".
    return " ".join(part for part in str(name).strip().split("|") if part).upper()


def parse_command_stats(stats: str) -> list[CommandStat]:
    parsed: list[CommandStat] = []
    for match in _CMDSTAT_LINE_RE.finditer(stats or ""):
        fields: dict[str, str] = {}
        for item in match.group(2).split(","):
            key, sep, value = item.partition("=")
            if sep:
                fields[key.strip()] = value.strip()
        parsed.append(
            CommandStat(
                name=match.group(1),
                calls=_int_field(fields.get("calls")),
                usec=_int_field(fields.get("usec")),
                usec_per_call=_float_field(fields.get("usec_per_call")),
                rejected_calls=_int_field(fields.get("rejected_calls")),
                failed_calls=_int_field(fields.get("failed_calls")),
            )
        )
    return parsed


def _int_field(raw: str | None) -> int:
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        return 0


def _float_field(raw: str | None) -> float:
    if raw is None:
        return 0.0
    try:
        return float(raw)
    except ValueError:
        return 0.0
