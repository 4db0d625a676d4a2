"""modgraph: graph the installed node_modules dependency tree of a project."""

__version__ = "0.1.0"
