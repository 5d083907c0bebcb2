"""REST API for the nesting engine."""

from sheetnest.web.app import create_app

__all__ = ["create_app"]
