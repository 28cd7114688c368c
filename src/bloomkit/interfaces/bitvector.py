"""Protocol definition for bit-addressable storage."""

from __future__ import annotations

from typing import Protocol

from ..core.types import BitIndex


class BitVector(Protocol):
    """Fixed-capacity array of bits addressed by [0, capacity)."""

    capacity: int

    def set(self, index: BitIndex) -> None:
        """Mark the bit at index. Idempotent."""
        ...

    def unset(self, index: BitIndex) -> None:
        """Clear the bit at index."""
        ...

    def is_set(self, index: BitIndex) -> bool:
        """Return True if the bit at index is marked."""
        ...

    def close(self) -> None:
        """Persist (if applicable) and release resources.

        Invariants:
            - Must be safe to call more than once
            - No bit operation is served after close
        """
        ...
