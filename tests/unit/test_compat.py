from rediscompat.analysis import SUPPORTED, UNSUPPORTED, annotate_with_versions
from rediscompat.catalog import build_catalog


def test_known_supported_command() -> None:
    catalog = build_catalog({"GET": {"since": "1.0.0", "compat_since": "0.1.0"}})
    [annotation] = annotate_with_versions(["GET"], catalog)
    assert annotation.to_dict() == {"name": "GET", "min_version": "1.0.0", "compat_detected": "Supported"}


def test_unknown_command_degrades_to_sentinel(sample_catalog) -> None:
    [annotation] = annotate_with_versions(["NOPE"], sample_catalog)
    assert annotation.name == "NOPE"
    assert annotation.min_version == UNSUPPORTED
    assert annotation.compat_detected == UNSUPPORTED
    assert annotation.known is False


def test_known_command_without_compat_marker(sample_catalog) -> None:
    [annotation] = annotate_with_versions(["getdel"], sample_catalog)
    assert annotation.name == "getdel"
    assert annotation.min_version == "6.2.0"
    assert annotation.compat_detected == UNSUPPORTED
    assert annotation.known is True
    assert annotation.supported is False


def test_order_and_duplicates_preserved(sample_catalog) -> None:
    names = ["set", "NOPE", "get", "set", "client list"]
    annotations = annotate_with_versions(names, sample_catalog)
    assert [item.name for item in annotations] == names
    assert [item.compat_detected for item in annotations] == [
        SUPPORTED,
        UNSUPPORTED,
        SUPPORTED,
        SUPPORTED,
        SUPPORTED,
    ]


def test_empty_input(sample_catalog) -> None:
    assert annotate_with_versions([], sample_catalog) == []


def test_accepts_any_iterable(sample_catalog) -> None:
    annotations = annotate_with_versions((name for name in ["get", "set"]), sample_catalog)
    assert [item.min_version for item in annotations] == ["1.0.0", "1.0.0"]


def test_default_catalog_is_used_when_none_given() -> None:
    [annotation] = annotate_with_versions(["ping"])
    assert annotation.min_version == "1.0.0"
    assert annotation.compat_detected == SUPPORTED


def test_known_does_not_depend_on_the_version_text() -> None:
    catalog = build_catalog({"ODD": {"since": "Unsupported", "compat_since": "1"}})
    [odd, missing] = annotate_with_versions(["odd", "missing"], catalog)
    assert odd.known is True
    assert odd.supported is True
    assert missing.known is False
