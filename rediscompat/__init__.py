"""Redis command catalog and compatibility queries."""

__version__ = "0.1.0"
