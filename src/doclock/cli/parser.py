"""CLI argument parsing."""

import argparse

from doclock.core.constants import SUPPORTED_STORES, VALID_LOG_FORMATS, VALID_LOG_LEVELS
from doclock.core.version import __version__


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        prog="doclock",
        description="doclock - Distributed locks stored as documents in Elasticsearch",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Take a lock (exit code 1 if someone else holds it)
  doclock acquire nightly-export --owner worker-1

  # Release it again
  doclock release nightly-export --owner worker-1

  # Who holds a lock?
  doclock status nightly-export

  # All locks in the namespace, as JSON
  doclock --index batch-locks list --json

  # Drop the whole lock namespace
  doclock reset --yes

Connection settings are read from DOCLOCK_* environment variables
(or a .env file) and can be overridden with the options below.
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--store", choices=SUPPORTED_STORES, help="Document store backend (default: elasticsearch)")
    parser.add_argument("--hosts", help="Comma-separated Elasticsearch URLs")
    parser.add_argument("--index", help="Lock namespace (index)")
    parser.add_argument("--doc-type", dest="doc_type", help="Lock document kind")
    parser.add_argument("--log-level", dest="log_level", type=str.upper, choices=VALID_LOG_LEVELS)
    parser.add_argument("--log-format", dest="log_format", type=str.lower, choices=VALID_LOG_FORMATS)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    acquire_parser = subparsers.add_parser("acquire", help="Take the lock on a resource")
    acquire_parser.add_argument("resource")
    acquire_parser.add_argument("--owner", help="Lock owner (default: DOCLOCK_OWNER)")

    release_parser = subparsers.add_parser("release", help="Release the lock on a resource")
    release_parser.add_argument("resource")
    release_parser.add_argument("--owner", help="Lock owner (default: DOCLOCK_OWNER)")

    status_parser = subparsers.add_parser("status", help="Show whether a resource is locked")
    status_parser.add_argument("resource")

    list_parser = subparsers.add_parser("list", help="List all held locks")
    list_parser.add_argument("--json", action="store_true", help="Print locks as JSON")

    reset_parser = subparsers.add_parser("reset", help="Delete the whole lock namespace")
    reset_parser.add_argument("--yes", action="store_true", help="Confirm deletion of every lock")

    return parser.parse_args(argv)
