"""Bloom filter engine - main public API.

Combines the hash family with one of the bit vector backends.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..components.file import FileBitVector
from ..components.hashing import HashFamily
from ..components.memory import MemoryBitVector
from ..components.remote import RemoteBitVector
from ..interfaces.bitvector import BitVector
from ..interfaces.client import ListClient
from .config import BloomConfig, validate_parameters
from .errors import ConfigurationError
from .types import Key

logger = logging.getLogger(__name__)


class BloomFilter:
    """Probabilistic set membership over a pluggable bit vector.

    Args:
        bits: Backing bit vector, owned by this filter from now on
        capacity_bits: Number of addressable bits (n)
        hash_count: Number of bit positions per key (k)
        hash_family: Hash family deriving the k positions

    Public API:
        - put(key) / put_string(key): Insert
        - has(key) / has_string(key): Membership test
        - close(): Persist (file backend) and release storage

    Invariants:
        - n and k are fixed for the lifetime of the filter
        - No false negatives: a key that was put always tests present
        - Bits are only ever set, never cleared, by put/has
    """

    def __init__(
        self,
        bits: BitVector,
        capacity_bits: int,
        hash_count: int,
        hash_family: HashFamily | None = None,
    ):
        validate_parameters(capacity_bits, hash_count)
        if bits.capacity != capacity_bits:
            raise ConfigurationError(
                f"Bit vector capacity {bits.capacity} does not match capacity_bits {capacity_bits}"
            )
        self._n = capacity_bits
        self._k = hash_count
        self._bits = bits
        self._hashes = hash_family or HashFamily()

    @property
    def capacity_bits(self) -> int:
        return self._n

    @property
    def hash_count(self) -> int:
        return self._k

    @property
    def bits(self) -> BitVector:
        return self._bits

    def put(self, key: Key) -> None:
        """Add key to the filter."""
        for index in self._hashes.indices(key, self._k, self._n):
            self._bits.set(index)

    def put_string(self, key: str) -> None:
        self.put(key.encode("utf-8"))

    def put_many(self, keys: Iterable[Key | str]) -> None:
        """Add every key in keys."""
        for key in keys:
            if isinstance(key, str):
                self.put_string(key)
            else:
                self.put(key)

    def has(self, key: Key) -> bool:
        """Return True if key may be present; False if definitely absent."""
        for index in self._hashes.indices(key, self._k, self._n):
            if not self._bits.is_set(index):
                return False
        return True

    def has_string(self, key: str) -> bool:
        return self.has(key.encode("utf-8"))

    def __contains__(self, key: Key | str) -> bool:
        if isinstance(key, str):
            return self.has_string(key)
        return self.has(key)

    def close(self) -> None:
        """Close the backing bit vector."""
        self._bits.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def new_memory_filter(capacity_bits: int, hash_count: int) -> BloomFilter:
    """Create a filter held entirely in process memory."""
    validate_parameters(capacity_bits, hash_count)
    return BloomFilter(MemoryBitVector(capacity_bits), capacity_bits, hash_count)


def new_file_filter(
    path: str | Path,
    capacity_bits: int,
    hash_count: int,
    compress_level: int = 6,
) -> BloomFilter:
    """Create a filter loaded from path (if present) and flushed there on close."""
    validate_parameters(capacity_bits, hash_count)
    bits = FileBitVector(path, capacity_bits, hash_count, compress_level=compress_level)
    return BloomFilter(bits, capacity_bits, hash_count)


def new_remote_filter(
    client: ListClient,
    capacity_bits: int,
    hash_count: int,
    key_prefix: str = "_bloomfilter",
    init_batch: int = 10_000,
) -> BloomFilter:
    """Create a filter whose bits live in a shared remote list.

    Filters with identical (capacity_bits, hash_count) and key_prefix share
    remote state.
    """
    validate_parameters(capacity_bits, hash_count)
    bits = RemoteBitVector(
        client, capacity_bits, hash_count, key_prefix=key_prefix, init_batch=init_batch
    )
    return BloomFilter(bits, capacity_bits, hash_count)


def open_filter(config: BloomConfig, client: ListClient | None = None) -> BloomFilter:
    """Create the filter described by config."""
    config.validate()

    if config.backend == "file":
        if not config.path:
            raise ConfigurationError("File backend requires a path")
        bloom = new_file_filter(
            config.path, config.capacity_bits, config.hash_count, compress_level=config.compress_level
        )
    elif config.backend == "remote":
        if client is None:
            raise ConfigurationError("Remote backend requires a client")
        bloom = new_remote_filter(
            client,
            config.capacity_bits,
            config.hash_count,
            key_prefix=config.remote_key_prefix,
            init_batch=config.remote_init_batch,
        )
    else:
        bloom = new_memory_filter(config.capacity_bits, config.hash_count)

    logger.info(
        f"Opened {config.backend} bloom filter n={config.capacity_bits} k={config.hash_count}"
    )
    return bloom
