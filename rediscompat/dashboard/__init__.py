"""HTTP API over the command catalog."""

from .api import create_app

__all__ = ["create_app"]
