"""typeschema command-line interface."""

from typeschema.cli.main import app, main

__all__ = ["app", "main"]
