"""Common type definitions for bloomkit.

Defines fundamental types and bit-packing constants shared by all backends.
"""

from __future__ import annotations

# Core primitive types
Key = bytes
BitIndex = int
Word = int

# Bits are packed into unsigned 64-bit words
WORD_BITS = 64
WORD_SHIFT = 6
WORD_MASK = WORD_BITS - 1


def word_count(capacity_bits: int) -> int:
    """Number of words needed to hold capacity_bits bits."""
    return (capacity_bits + WORD_MASK) >> WORD_SHIFT
