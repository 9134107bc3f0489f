"""CLI entrypoint for doclock."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable

from doclock.cli.parser import parse_arguments
from doclock.core.colors import ConsoleColors
from doclock.core.config import DocLockConfig
from doclock.core.exceptions import InvalidConfiguration, InvalidParameters, LockNotHeld, StoreError
from doclock.core.locks import LockManager, create_document_store
from doclock.core.logging import setup_logging

EXIT_OK = 0
EXIT_NEGATIVE = 1  # Contended acquire, release without a lock, refused reset
EXIT_ERROR = 2


def _owner(args: argparse.Namespace, config: DocLockConfig) -> str | None:
    return getattr(args, "owner", None) or config.lock.owner


async def _acquire(manager: LockManager, args: argparse.Namespace, config: DocLockConfig) -> int:
    if await manager.acquire(args.resource, _owner(args, config)):
        print(ConsoleColors.success(f"Acquired lock on '{args.resource}'"))
        return EXIT_OK
    print(ConsoleColors.warning(f"Lock on '{args.resource}' is already held"))
    return EXIT_NEGATIVE


async def _release(manager: LockManager, args: argparse.Namespace, config: DocLockConfig) -> int:
    try:
        await manager.release(args.resource, _owner(args, config))
    except LockNotHeld as e:
        print(ConsoleColors.warning(str(e)))
        return EXIT_NEGATIVE
    print(ConsoleColors.success(f"Released lock on '{args.resource}'"))
    return EXIT_OK


async def _status(manager: LockManager, args: argparse.Namespace, config: DocLockConfig) -> int:
    status = await manager.is_locked(args.resource)
    if status.error is not None:
        print(ConsoleColors.error(f"{args.resource}: locked (state unknown: {status.error})"))
        return EXIT_ERROR
    if status.locked:
        print(f"{args.resource}: {ConsoleColors.warning('locked')} by {status.owner}")
    else:
        print(f"{args.resource}: {ConsoleColors.success('unlocked')}")
    return EXIT_OK


async def _list(manager: LockManager, args: argparse.Namespace, config: DocLockConfig) -> int:
    locks = await manager.list_locks()
    if locks is False:
        if args.json:
            print(json.dumps(None))
        else:
            print(ConsoleColors.info(f"No lock namespace '{manager.index}'"))
        return EXIT_OK

    if args.json:
        print(json.dumps(locks, indent=2, sort_keys=True))
    elif not locks:
        print(ConsoleColors.info("No locks held"))
    else:
        width = max(len(resource) for resource in locks)
        for resource in sorted(locks):
            print(f"{resource.ljust(width)}  {locks[resource].get('owner', '')}")
    return EXIT_OK


async def _reset(manager: LockManager, args: argparse.Namespace, config: DocLockConfig) -> int:
    if not args.yes:
        print(ConsoleColors.warning(f"Refusing to delete lock namespace '{manager.index}' without --yes"))
        return EXIT_NEGATIVE
    await manager.delete()
    print(ConsoleColors.success(f"Deleted lock namespace '{manager.index}'"))
    return EXIT_OK


_COMMANDS: dict[str, Callable[[LockManager, argparse.Namespace, DocLockConfig], Awaitable[int]]] = {
    "acquire": _acquire,
    "release": _release,
    "status": _status,
    "list": _list,
    "reset": _reset,
}


async def run_command(args: argparse.Namespace, config: DocLockConfig) -> int:
    """Run one CLI command against the configured store and return its exit code."""
    store = create_document_store(config=config.store)
    try:
        manager = LockManager.from_config(config.lock, store)
        return await _COMMANDS[args.command](manager, args, config)
    except (InvalidConfiguration, InvalidParameters) as e:
        print(ConsoleColors.error(f"Error: {e}"), file=sys.stderr)
        return EXIT_ERROR
    except StoreError as e:
        print(ConsoleColors.error(f"Store error: {e}"), file=sys.stderr)
        return EXIT_ERROR
    finally:
        await store.close()


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``doclock`` console script."""
    args = parse_arguments(argv)

    try:
        config = DocLockConfig.from_env().with_args(args)
    except InvalidConfiguration as e:
        print(ConsoleColors.error(f"Configuration error: {e}"), file=sys.stderr)
        sys.exit(EXIT_ERROR)

    logger = setup_logging(config.log)
    logger.debug("Running '%s' against %s store", args.command, config.store.backend)
    exit_code = asyncio.run(run_command(args, config))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
