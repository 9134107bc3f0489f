"""Core module - Foundation components shared by the lock manager and CLI.

This module provides the basic building blocks used throughout the application:
- Version information
- Custom exceptions
- Configuration dataclasses
- Constants and defaults
"""

from doclock.core.version import __version__

from doclock.core.exceptions import (
    DocLockError,
    InvalidConfiguration,
    InvalidParameters,
    StoreError,
    LockNotHeld,
)

from doclock.core.config import (
    OwnerMode,
    StoreConfig,
    LockConfig,
    LogConfig,
    DocLockConfig,
)

__all__ = [
    # Version
    '__version__',
    # Exceptions
    'DocLockError',
    'InvalidConfiguration',
    'InvalidParameters',
    'StoreError',
    'LockNotHeld',
    # Config dataclasses
    'OwnerMode',
    'StoreConfig',
    'LockConfig',
    'LogConfig',
    'DocLockConfig',
]
