from pathlib import Path

import pytest

from rediscompat.catalog import (
    CatalogError,
    CommandRecord,
    build_catalog,
    default_catalog,
    load_catalog,
)


def test_lookup_is_case_insensitive(sample_catalog) -> None:
    record = sample_catalog.lookup("get")
    assert record is not None
    assert record.name == "GET"
    assert sample_catalog.lookup("Client List") is sample_catalog.lookup("CLIENT LIST")


def test_lookup_unknown_name_returns_none(sample_catalog) -> None:
    assert sample_catalog.lookup("NOPE") is None
    assert sample_catalog.lookup("") is None
    assert "nope" not in sample_catalog
    assert "get" in sample_catalog


def test_every_entry_resolves_through_lookup(sample_catalog) -> None:
    for name, record in sample_catalog.entries().items():
        assert sample_catalog.lookup(name.lower()) is record
        assert record.name == name


def test_entries_view_is_read_only(sample_catalog) -> None:
    entries = sample_catalog.entries()
    with pytest.raises(TypeError):
        entries["NEW"] = entries["GET"]  # type: ignore[index]
    assert len(sample_catalog) == 6
    assert list(sample_catalog) == sample_catalog.names()


def test_records_are_immutable(sample_catalog) -> None:
    record = sample_catalog.lookup("GET")
    with pytest.raises(AttributeError):
        record.since = "9.9.9"  # type: ignore[misc]


def test_compat_marker_is_presence_based() -> None:
    catalog = build_catalog(
        {
            "A": {"since": "1.0.0", "compat_since": "0.0.0"},
            "B": {"since": "1.0.0"},
        }
    )
    assert catalog.lookup("A").compat_supported is True
    assert catalog.lookup("B").compat_supported is False


def test_subcommands_are_top_level_entries(sample_catalog) -> None:
    record = sample_catalog.lookup("client list")
    assert record.is_subcommand is True
    assert record.parent == "CLIENT"
    assert sample_catalog.lookup("CLIENT") is None
    assert [item.name for item in sample_catalog.subcommands("client")] == ["CLIENT LIST", "CLIENT INFO"]


def test_groups_in_first_seen_order(sample_catalog) -> None:
    assert sample_catalog.groups() == ["string", "connection", "server"]


def test_build_catalog_uppercases_keys() -> None:
    catalog = build_catalog({"object encoding": {"since": "2.2.3"}})
    assert catalog.names() == ["OBJECT ENCODING"]


def test_build_catalog_rejects_duplicate_identifiers() -> None:
    with pytest.raises(CatalogError, match="duplicate"):
        build_catalog({"get": {"since": "1.0.0"}, "GET": {"since": "1.0.0"}})


def test_record_requires_since() -> None:
    with pytest.raises(CatalogError, match="since"):
        CommandRecord.from_mapping("GET", {"summary": "no version"})


def test_record_rejects_malformed_history() -> None:
    with pytest.raises(CatalogError, match="history"):
        CommandRecord.from_mapping("GET", {"since": "1.0.0", "history": [["6.2.0"]]})


def test_record_parses_argument_tree() -> None:
    record = CommandRecord.from_mapping(
        "SET",
        {
            "since": "1.0.0",
            "arity": -3,
            "acl_categories": ["@write", "@string"],
            "history": [["6.0.0", "Added the `KEEPTTL` option."]],
            "arguments": [
                {"name": "key", "type": "key", "key_spec_index": 0},
                {
                    "name": "condition",
                    "type": "oneof",
                    "optional": True,
                    "arguments": [
                        {"name": "nx", "type": "pure-token", "token": "NX"},
                        {"name": "xx", "type": "pure-token", "token": "XX"},
                    ],
                },
            ],
        },
    )
    assert record.arity == -3
    assert record.acl_categories == ("@write", "@string")
    assert record.history[0].version == "6.0.0"
    condition = record.arguments[1]
    assert condition.optional is True
    assert [child.token for child in condition.arguments] == ["NX", "XX"]
    payload = record.to_dict()
    assert payload["arguments"][0] == {"name": "key", "type": "key", "key_spec_index": 0}
    assert payload["history"] == [["6.0.0", "Added the `KEEPTTL` option."]]


def test_load_catalog_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "commands.yml"
    path.write_text(
        'version: "t1"\n'
        "commands:\n"
        "  get:\n"
        '    since: "1.0.0"\n'
        '    compat_since: "0.1.0"\n'
        "  hexpire:\n"
        '    since: "7.4.0"\n',
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    assert catalog.revision == "t1"
    assert catalog.names() == ["GET", "HEXPIRE"]


def test_load_catalog_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "missing.yml")


def test_load_catalog_rejects_non_object_document(tmp_path: Path) -> None:
    path = tmp_path / "commands.yml"
    path.write_text("- GET\n- SET\n", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_default_catalog_is_shared_instance() -> None:
    first = default_catalog()
    second = default_catalog()
    assert first is second
    assert len(first) > 0


@pytest.mark.parametrize(
    ("raw", "field_name"),
    [
        ({"since": "1.0.0", "arity": "many"}, "arity"),
        ({"since": "1.0.0", "arity": True}, "arity"),
        ({"since": "1.0.0", "arguments": [{"name": "key", "key_spec_index": "first"}]}, "key_spec_index"),
    ],
)
def test_non_integer_fields_name_the_command(raw: dict, field_name: str) -> None:
    with pytest.raises(CatalogError, match=f"command 'GET' field '{field_name}'"):
        build_catalog({"get": raw})
