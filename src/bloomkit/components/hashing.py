"""Hash family deriving k bit positions from one key.

The key is diffused once through SHA-256; each of the k positions is then a
seeded 64-bit MurmurHash3 of that digest, reduced modulo the capacity.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator

import mmh3

from ..core.config import validate_parameters
from ..core.types import BitIndex, Key


def hash_digest(digest: bytes, seed: int) -> int:
    """Unsigned 64-bit MurmurHash3 (x64, low half) of digest with seed."""
    return mmh3.hash64(digest, seed, signed=False)[0]


def hash_data(data: Key, seed: int) -> int:
    """Unsigned 64-bit hash of data for a single seed."""
    return hash_digest(hashlib.sha256(data).digest(), seed)


class HashFamily:
    """Deterministic family of k hash functions over byte keys.

    Invariants:
        - Same key, k and n always yield the same index sequence
        - Every index lies in [0, n)
    """

    def indices(self, key: Key, k: int, n: int) -> Iterator[BitIndex]:
        """Lazily yield the k bit indices for key."""
        validate_parameters(n, k)

        digest = hashlib.sha256(key).digest()
        for seed in range(k):
            yield hash_digest(digest, seed) % n

    def hashes(self, key: Key, k: int, n: int) -> list[BitIndex]:
        """Return all k bit indices for key, in seed order."""
        return list(self.indices(key, k, n))
