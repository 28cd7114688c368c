"""Protocol definition for a bloom filter."""

from __future__ import annotations

from typing import Protocol

from ..core.types import Key


class Filter(Protocol):
    """Probabilistic set membership test."""

    def put(self, key: Key) -> None:
        """Add key to the filter."""
        ...

    def put_string(self, key: str) -> None:
        """Add the UTF-8 encoding of key to the filter."""
        ...

    def has(self, key: Key) -> bool:
        """Return True if key may be present; False if definitely absent."""
        ...

    def has_string(self, key: str) -> bool:
        """Return True if the UTF-8 encoding of key may be present."""
        ...

    def close(self) -> None:
        """Release the backing storage."""
        ...
