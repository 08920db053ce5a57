"""Command-line interface."""
from relaylogs.cli.main import main

__all__ = ["main"]
