"""Process-local bit vector.

Bits are packed into an array of unsigned 64-bit words.
"""

from __future__ import annotations

import sys
from array import array

from ..core.errors import BitIndexError, StorageError
from ..core.types import WORD_MASK, WORD_SHIFT, BitIndex, word_count


class MemoryBitVector:
    """Packed bit array of fixed capacity held in process memory.

    Args:
        capacity: Number of addressable bits

    Invariants:
        - Storage is rounded up to a whole number of 64-bit words
        - Every addressed index lies in [0, capacity)
        - Bits outside [0, capacity) in the last word are never set
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._words: array | None = array("Q", [0]) * word_count(capacity)

    def _locate(self, index: BitIndex) -> tuple[int, int]:
        if self._words is None:
            raise RuntimeError("Bit vector is closed")
        if not 0 <= index < self.capacity:
            raise BitIndexError(f"Bit index {index} out of range [0, {self.capacity})")
        return index >> WORD_SHIFT, index & WORD_MASK

    def set(self, index: BitIndex) -> None:
        """Mark the bit at index."""
        word, bit = self._locate(index)
        self._words[word] |= 1 << bit

    def unset(self, index: BitIndex) -> None:
        """Clear the bit at index."""
        word, bit = self._locate(index)
        self._words[word] &= ~(1 << bit) & 0xFFFFFFFFFFFFFFFF

    def is_set(self, index: BitIndex) -> bool:
        """Return True if the bit at index is marked."""
        word, bit = self._locate(index)
        return bool(self._words[word] >> bit & 1)

    def bit_count(self) -> int:
        """Number of bits currently set."""
        if self._words is None:
            raise RuntimeError("Bit vector is closed")
        return sum(w.bit_count() for w in self._words if w)

    @property
    def word_count(self) -> int:
        return word_count(self.capacity)

    def to_bytes(self) -> bytes:
        """Packed words as little-endian unsigned 64-bit integers."""
        if self._words is None:
            raise RuntimeError("Bit vector is closed")
        if sys.byteorder == "little":
            return self._words.tobytes()
        words = array("Q", self._words)
        words.byteswap()
        return words.tobytes()

    @classmethod
    def from_bytes(cls, capacity: int, data: bytes) -> MemoryBitVector:
        """Rebuild a bit vector from the output of to_bytes()."""
        bv = cls(capacity)
        expected = bv.word_count * bv._words.itemsize
        if len(data) != expected:
            raise StorageError(f"Expected {expected} bytes of bit words, got {len(data)}")

        words = array("Q")
        words.frombytes(data)
        if sys.byteorder != "little":
            words.byteswap()

        # Stray bits past capacity would mean the words belong to another filter
        tail = capacity & WORD_MASK
        if tail and words[-1] >> tail:
            raise StorageError(f"Bits set beyond capacity {capacity}")

        bv._words = words
        return bv

    def close(self) -> None:
        """Discard the buffer."""
        self._words = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
