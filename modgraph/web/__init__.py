"""Web viewer for a built dependency graph."""

from modgraph.web.app import create_app, serve

__all__ = ["create_app", "serve"]
