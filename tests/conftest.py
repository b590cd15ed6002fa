from __future__ import annotations

import pytest

from rediscompat.catalog import CommandCatalog, build_catalog


@pytest.fixture
def sample_catalog() -> CommandCatalog:
    return build_catalog(
        {
            "GET": {"summary": "Returns the string value of a key.", "since": "1.0.0", "compat_since": "0.1.0", "group": "string"},
            "SET": {"summary": "Sets the string value of a key.", "since": "1.0.0", "compat_since": "0.1.0", "group": "string"},
            "GETDEL": {"summary": "Returns and deletes a key.", "since": "6.2.0", "group": "string"},
            "CLIENT LIST": {"summary": "Lists open connections.", "since": "2.4.0", "compat_since": "0.1.0", "group": "connection"},
            "CLIENT INFO": {"summary": "Returns information about the connection.", "since": "6.2.0", "group": "connection"},
            "FUTURE": {"summary": "A command from a far-future release.", "since": "10.0.0", "group": "server"},
        },
        revision="test",
    )
