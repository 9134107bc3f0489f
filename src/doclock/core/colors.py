"""Console colors for doclock CLI output.

ANSI codes are only emitted when stdout is a TTY, so piped output and
captured test output stay plain.
"""

import os
import sys


class ConsoleColors:
    """ANSI color codes for terminal output."""

    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    RESET = '\033[0m'

    # Disable colors if not a TTY or on Windows without ANSI support
    _enabled = sys.stdout.isatty() and (os.name != 'nt' or bool(os.environ.get('TERM')))

    @classmethod
    def _wrap(cls, color: str, text: str) -> str:
        if cls._enabled:
            return f"{color}{text}{cls.RESET}"
        return text

    @classmethod
    def success(cls, text: str) -> str:
        """Format text as success (green)"""
        return cls._wrap(cls.GREEN, text)

    @classmethod
    def error(cls, text: str) -> str:
        """Format text as error (red)"""
        return cls._wrap(cls.RED, text)

    @classmethod
    def warning(cls, text: str) -> str:
        """Format text as warning (yellow)"""
        return cls._wrap(cls.YELLOW, text)

    @classmethod
    def info(cls, text: str) -> str:
        """Format text as info (cyan)"""
        return cls._wrap(cls.CYAN, text)
