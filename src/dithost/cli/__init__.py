"""dithost command-line interface (``dithost`` entry point)."""

from dithost.cli.app import app

__all__ = ["app"]
