"""Command-line interface for doclock."""

from doclock.cli.main import main, run_command
from doclock.cli.parser import parse_arguments

__all__ = ["main", "parse_arguments", "run_command"]
