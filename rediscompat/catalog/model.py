"""Command record types for the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


class CatalogError(ValueError):
    """Raised when catalog data cannot be turned into command records."""


def canonical_name(name: str) -> str:
    return str(name).upper()


def _string_or_none(raw: Any) -> str | None:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def _string_tuple(raw: Any, *, field_name: str, command: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise CatalogError(f"command '{command}' field '{field_name}' must be a list")
    return tuple(str(item).strip() for item in raw if str(item).strip())


def _int_or_none(raw: Any, *, field_name: str, command: str) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise CatalogError(f"command '{command}' field '{field_name}' must be an integer")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"command '{command}' field '{field_name}' must be an integer") from exc


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    version: str
    note: str


@dataclass(frozen=True, slots=True)
class CommandArgument:
    name: str
    type: str
    display_text: str | None = None
    token: str | None = None
    optional: bool = False
    multiple: bool = False
    multiple_token: bool = False
    key_spec_index: int | None = None
    since: str | None = None
    deprecated_since: str | None = None
    arguments: tuple[CommandArgument, ...] = ()

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], *, command: str) -> CommandArgument:
        if not isinstance(raw, Mapping):
            raise CatalogError(f"command '{command}' has a non-object argument entry")
        name = str(raw.get("name", "")).strip()
        if not name:
            raise CatalogError(f"command '{command}' has an argument without a name")
        children = raw.get("arguments") or []
        if not isinstance(children, list):
            raise CatalogError(f"command '{command}' argument '{name}' has invalid nested arguments")
        return cls(
            name=name,
            type=str(raw.get("type", "string")).strip() or "string",
            display_text=_string_or_none(raw.get("display_text")),
            token=_string_or_none(raw.get("token")),
            optional=bool(raw.get("optional", False)),
            multiple=bool(raw.get("multiple", False)),
            multiple_token=bool(raw.get("multiple_token", False)),
            key_spec_index=_int_or_none(raw.get("key_spec_index"), field_name="key_spec_index", command=command),
            since=_string_or_none(raw.get("since")),
            deprecated_since=_string_or_none(raw.get("deprecated_since")),
            arguments=tuple(cls.from_mapping(child, command=command) for child in children),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "type": self.type}
        for key in ("display_text", "token", "key_spec_index", "since", "deprecated_since"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        for key in ("optional", "multiple", "multiple_token"):
            if getattr(self, key):
                payload[key] = True
        if self.arguments:
            payload["arguments"] = [child.to_dict() for child in self.arguments]
        return payload


@dataclass(frozen=True, slots=True)
class CommandRecord:
    """Metadata for one command or "PARENT CHILD" subcommand.

    Only ``since`` and the presence of ``compat_since`` drive any query
    logic; the remaining fields are carried through as descriptive data.
    """

    name: str
    summary: str
    since: str
    compat_since: str | None = None
    group: str = ""
    complexity: str | None = None
    arity: int | None = None
    acl_categories: tuple[str, ...] = ()
    command_flags: tuple[str, ...] = ()
    doc_flags: tuple[str, ...] = ()
    arguments: tuple[CommandArgument, ...] = ()
    history: tuple[HistoryEntry, ...] = field(default_factory=tuple)
    deprecated_since: str | None = None
    replaced_by: str | None = None

    @property
    def compat_supported(self) -> bool:
        return self.compat_since is not None

    @property
    def is_subcommand(self) -> bool:
        return " " in self.name

    @property
    def parent(self) -> str | None:
        if not self.is_subcommand:
            return None
        return self.name.split(" ", 1)[0]

    @classmethod
    def from_mapping(cls, name: str, raw: Mapping[str, Any]) -> CommandRecord:
        command = canonical_name(str(name).strip())
        if not command:
            raise CatalogError("command identifier must be non-empty")
        if not isinstance(raw, Mapping):
            raise CatalogError(f"command '{command}' must be an object")
        since = _string_or_none(raw.get("since"))
        if since is None:
            raise CatalogError(f"command '{command}' is missing 'since'")

        arguments_raw = raw.get("arguments") or []
        if not isinstance(arguments_raw, list):
            raise CatalogError(f"command '{command}' field 'arguments' must be a list")

        history_raw = raw.get("history") or []
        if not isinstance(history_raw, list):
            raise CatalogError(f"command '{command}' field 'history' must be a list")
        history: list[HistoryEntry] = []
        for item in history_raw:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise CatalogError(f"command '{command}' history entries must be [version, note] pairs")
            history.append(HistoryEntry(version=str(item[0]).strip(), note=str(item[1]).strip()))

        return cls(
            name=command,
            summary=str(raw.get("summary", "")).strip(),
            since=since,
            compat_since=_string_or_none(raw.get("compat_since")),
            group=str(raw.get("group", "")).strip(),
            complexity=_string_or_none(raw.get("complexity")),
            arity=_int_or_none(raw.get("arity"), field_name="arity", command=command),
            acl_categories=_string_tuple(raw.get("acl_categories"), field_name="acl_categories", command=command),
            command_flags=_string_tuple(raw.get("command_flags"), field_name="command_flags", command=command),
            doc_flags=_string_tuple(raw.get("doc_flags"), field_name="doc_flags", command=command),
            arguments=tuple(CommandArgument.from_mapping(item, command=command) for item in arguments_raw),
            history=tuple(history),
            deprecated_since=_string_or_none(raw.get("deprecated_since")),
            replaced_by=_string_or_none(raw.get("replaced_by")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "summary": self.summary,
            "since": self.since,
            "compat_since": self.compat_since,
            "group": self.group,
            "complexity": self.complexity,
            "arity": self.arity,
            "acl_categories": list(self.acl_categories),
            "command_flags": list(self.command_flags),
            "doc_flags": list(self.doc_flags),
            "arguments": [argument.to_dict() for argument in self.arguments],
            "history": [[entry.version, entry.note] for entry in self.history],
            "deprecated_since": self.deprecated_since,
            "replaced_by": self.replaced_by,
        }
