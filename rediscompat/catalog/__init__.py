"""Static Redis command catalog."""

from .model import CatalogError, CommandArgument, CommandRecord, HistoryEntry, canonical_name
from .store import BUNDLED_CATALOG_PATH, CommandCatalog, build_catalog, default_catalog, load_catalog

__all__ = [
    "BUNDLED_CATALOG_PATH",
    "CatalogError",
    "CommandArgument",
    "CommandCatalog",
    "CommandRecord",
    "HistoryEntry",
    "build_catalog",
    "canonical_name",
    "default_catalog",
    "load_catalog",
]
