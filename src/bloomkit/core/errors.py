"""Exception hierarchy for bloomkit.

Every error raised by the library derives from BloomError and carries
an ErrorKind so callers can decide whether to crash, retry, or degrade.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Broad category of a bloomkit failure."""

    CONFIGURATION = "configuration"
    STORAGE = "storage"
    TRANSPORT = "transport"
    BOUNDS = "bounds"


class BloomError(Exception):
    """Base exception for all bloomkit errors."""

    kind: ErrorKind | None = None


class ConfigurationError(BloomError, ValueError):
    """Raised when filter parameters are invalid."""

    kind = ErrorKind.CONFIGURATION


class StorageError(BloomError):
    """Raised when durable state cannot be read, decoded, or written."""

    kind = ErrorKind.STORAGE


class TransportError(BloomError):
    """Raised when a remote store command fails."""

    kind = ErrorKind.TRANSPORT


class BitIndexError(BloomError, IndexError):
    """Raised when a bit index falls outside [0, capacity)."""

    kind = ErrorKind.BOUNDS
