"""Git working-tree status tracking for a single repository."""

__version__ = "0.1.0"
