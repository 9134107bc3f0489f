"""Configuration dataclasses for doclock.

These dataclasses centralize all configuration options for type safety
and easy testing. They can be created from environment variables,
command-line arguments, or used directly in code.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from doclock.core.constants import (
    DEFAULT_DOC_TYPE,
    DEFAULT_HOSTS,
    DEFAULT_INDEX,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SEARCH_SIZE,
    DEFAULT_STORE,
    DEFAULT_STORE_MAX_RETRIES,
    ENV_VAR_MAPPING,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
)
from doclock.core.exceptions import InvalidConfiguration


class OwnerMode(Enum):
    """How a lock manager learns who the lock owner is."""

    PER_CALL = "per-call"  # Owner passed to every acquire/release
    BOUND = "bound"  # Owner fixed when the manager is built

    @classmethod
    def parse(cls, value: str) -> OwnerMode:
        normalized = value.strip().lower().replace("_", "-")
        for mode in cls:
            if mode.value == normalized:
                return mode
        valid = ", ".join(mode.value for mode in cls)
        raise InvalidConfiguration(f"Unknown owner mode '{value}'", field="owner_mode", details=f"expected {valid}")


@dataclass
class StoreConfig:
    """Configuration for the document store client.

    Attributes:
        backend: Store implementation, "elasticsearch" or "memory" (default: "elasticsearch")
        hosts: Elasticsearch node URLs (default: http://localhost:9200)
        api_key: Optional API key
        username: Optional basic-auth user
        password: Optional basic-auth password
        request_timeout: Per-request timeout in seconds (default: 10.0)
        max_retries: Transport-level retries (default: 3)
        retry_on_timeout: Let the transport retry timed out requests (default: False)
    """

    backend: str = DEFAULT_STORE
    hosts: list[str] = field(default_factory=lambda: list(DEFAULT_HOSTS))
    api_key: str | None = None
    username: str | None = None
    password: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_STORE_MAX_RETRIES
    retry_on_timeout: bool = False

    def basic_auth(self) -> tuple[str, str] | None:
        if self.username and self.password is not None:
            return (self.username, self.password)
        return None


@dataclass
class LockConfig:
    """Configuration for a lock manager.

    Attributes:
        index: Namespace holding the lock documents (default: "locks")
        doc_type: Document kind of the lock documents (default: "lockdocument")
        owner_mode: Per-call or bound owner (default: per-call)
        owner: Bound owner, required when owner_mode is BOUND
        search_size: Maximum number of locks returned by a listing (default: 10000)
    """

    index: str = DEFAULT_INDEX
    doc_type: str = DEFAULT_DOC_TYPE
    owner_mode: OwnerMode = OwnerMode.PER_CALL
    owner: str | None = None
    search_size: int = DEFAULT_SEARCH_SIZE


@dataclass
class LogConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level string (default: "INFO")
        format: "text" or "json" (default: "text")
        file: Optional log file path; console only when unset
        file_max_bytes: Maximum size per log file (default: 10MB)
        file_backup_count: Number of backup log files (default: 5)
    """

    level: str = "INFO"
    format: str = "text"
    file: str | None = None
    file_max_bytes: int = LOG_FILE_MAX_BYTES
    file_backup_count: int = LOG_FILE_BACKUP_COUNT


def _bootstrap_dotenv(logger: logging.Logger) -> None:
    """Load .env variables if python-dotenv is available."""
    try:
        from dotenv import load_dotenv
    except ImportError:
        logger.debug("python-dotenv not installed (.env files will not be auto-loaded)")
        return

    if load_dotenv():
        logger.debug(".env file found and loaded")
    else:
        logger.debug(".env file not found")


def _parse_int(environ: Mapping[str, str], name: str, default: int) -> int:
    env_name = ENV_VAR_MAPPING[name]
    raw = environ.get(env_name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidConfiguration(f"{env_name} must be an integer", field=name, details=repr(raw)) from e


def _parse_float(environ: Mapping[str, str], name: str, default: float) -> float:
    env_name = ENV_VAR_MAPPING[name]
    raw = environ.get(env_name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise InvalidConfiguration(f"{env_name} must be a number", field=name, details=repr(raw)) from e


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    env_name = ENV_VAR_MAPPING[name]
    raw = environ.get(env_name)
    if raw is None or not raw.strip():
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise InvalidConfiguration(f"{env_name} must be true or false", field=name, details=repr(raw))


def _parse_hosts(raw: str | None) -> list[str]:
    if not raw:
        return list(DEFAULT_HOSTS)
    hosts = [host.strip() for host in raw.split(",") if host.strip()]
    return hosts or list(DEFAULT_HOSTS)


@dataclass
class DocLockConfig:
    """Master configuration for doclock.

    Attributes:
        store: Document store configuration
        lock: Lock manager configuration
        log: Logging configuration
    """

    store: StoreConfig = field(default_factory=StoreConfig)
    lock: LockConfig = field(default_factory=LockConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        load_dotenv: bool = True,
        logger: logging.Logger | None = None,
    ) -> DocLockConfig:
        """Create configuration from DOCLOCK_* environment variables.

        A .env file in the working directory is loaded first when
        python-dotenv is installed and ``environ`` is not given explicitly.
        """
        log = logger or logging.getLogger(__name__)
        if environ is None:
            if load_dotenv:
                _bootstrap_dotenv(log)
            environ = os.environ

        def get(name: str) -> str | None:
            value = environ.get(ENV_VAR_MAPPING[name])
            return value if value else None

        owner_mode_raw = get("owner_mode")
        owner_mode = OwnerMode.parse(owner_mode_raw) if owner_mode_raw else OwnerMode.PER_CALL

        return cls(
            store=StoreConfig(
                backend=(get("store") or DEFAULT_STORE).strip().lower(),
                hosts=_parse_hosts(get("hosts")),
                api_key=get("api_key"),
                username=get("username"),
                password=get("password"),
                request_timeout=_parse_float(environ, "request_timeout", DEFAULT_REQUEST_TIMEOUT),
                max_retries=_parse_int(environ, "max_retries", DEFAULT_STORE_MAX_RETRIES),
                retry_on_timeout=_parse_bool(environ, "retry_on_timeout", False),
            ),
            lock=LockConfig(
                index=get("index") or DEFAULT_INDEX,
                doc_type=get("doc_type") or DEFAULT_DOC_TYPE,
                owner_mode=owner_mode,
                owner=get("owner"),
                search_size=_parse_int(environ, "search_size", DEFAULT_SEARCH_SIZE),
            ),
            log=LogConfig(
                level=get("log_level") or "INFO",
                format=get("log_format") or "text",
                file=get("log_file"),
            ),
        )

    def with_args(self, args: argparse.Namespace) -> DocLockConfig:
        """Overlay parsed command-line arguments on top of this configuration.

        Only options that were actually given on the command line win.
        """
        store = self.store
        if getattr(args, "store", None):
            store = replace(store, backend=args.store.strip().lower())
        if getattr(args, "hosts", None):
            store = replace(store, hosts=_parse_hosts(args.hosts))

        lock = self.lock
        if getattr(args, "index", None):
            lock = replace(lock, index=args.index)
        if getattr(args, "doc_type", None):
            lock = replace(lock, doc_type=args.doc_type)

        log = self.log
        if getattr(args, "log_level", None):
            log = replace(log, level=args.log_level)
        if getattr(args, "log_format", None):
            log = replace(log, format=args.log_format)

        return DocLockConfig(store=store, lock=lock, log=log)
