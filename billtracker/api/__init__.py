"""HTTP API package."""

from billtracker.api.app import create_app

__all__ = ["create_app"]
