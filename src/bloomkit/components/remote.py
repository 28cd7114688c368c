"""Remote-store-backed bit vector.

Each bit is one element of a remote list. The list key is derived from the
filter parameters alone, so filters with identical (n, k) share remote state
across instances and processes.
"""

from __future__ import annotations

import logging

from redis.exceptions import RedisError

from ..core.config import validate_init_batch
from ..core.errors import BitIndexError, TransportError
from ..core.types import BitIndex
from ..interfaces.client import ListClient

logger = logging.getLogger(__name__)

SET = b"1"
UNSET = b"0"


def remote_key(capacity: int, hash_count: int, prefix: str = "_bloomfilter") -> str:
    """Shared list key for a filter with the given parameters."""
    return f"{prefix}:n{capacity}:k{hash_count}"


def _is_set_reply(value: bytes | str | None) -> bool:
    if isinstance(value, str):
        value = value.encode()
    return value == SET


class RemoteBitVector:
    """Bit vector stored as a remote list of n sentinel elements.

    Args:
        client: Already-connected list client (e.g. redis.Redis)
        capacity: Number of addressable bits
        hash_count: Hash count of the owning filter, part of the key
        key_prefix: Prefix of the remote key
        init_batch: Elements pushed per command when recreating the list

    Invariants:
        - After construction the remote list holds exactly capacity elements
        - close() never mutates remote state

    Construction checks the list length and, on mismatch, deletes and
    recreates it. Two processes constructing the same filter concurrently can
    both recreate the list and wipe bits set in between; callers that share a
    filter must serialize construction themselves.
    """

    def __init__(
        self,
        client: ListClient,
        capacity: int,
        hash_count: int,
        key_prefix: str = "_bloomfilter",
        init_batch: int = 10_000,
    ):
        validate_init_batch(init_batch)
        self.capacity = capacity
        self.hash_count = hash_count
        self.key = remote_key(capacity, hash_count, key_prefix)
        self.init_batch = init_batch
        self._client: ListClient | None = client
        self._ensure_list()

    def _ensure_list(self) -> None:
        """Reset the remote list to capacity unset elements if its length differs."""
        client = self._require_open()
        try:
            length = int(client.llen(self.key))
            if length == self.capacity:
                logger.debug(f"Reusing remote list {self.key}")
                return

            logger.info(f"Reinitializing remote list {self.key}: length {length} != {self.capacity}")
            client.delete(self.key)
            remaining = self.capacity
            while remaining > 0:
                batch = min(self.init_batch, remaining)
                client.rpush(self.key, *([UNSET] * batch))
                remaining -= batch
        except RedisError as e:
            raise TransportError(f"Failed to initialize remote list {self.key}: {e}") from e

    def _require_open(self) -> ListClient:
        if self._client is None:
            raise RuntimeError("Bit vector is closed")
        return self._client

    def _check(self, index: BitIndex) -> None:
        if not 0 <= index < self.capacity:
            raise BitIndexError(f"Bit index {index} out of range [0, {self.capacity})")

    def set(self, index: BitIndex) -> None:
        """Write the set sentinel at index."""
        client = self._require_open()
        self._check(index)
        try:
            client.lset(self.key, index, SET)
        except RedisError as e:
            raise TransportError(f"LSET {self.key}[{index}] failed: {e}") from e

    def unset(self, index: BitIndex) -> None:
        """Write the unset sentinel at index."""
        client = self._require_open()
        self._check(index)
        try:
            client.lset(self.key, index, UNSET)
        except RedisError as e:
            raise TransportError(f"LSET {self.key}[{index}] failed: {e}") from e

    def is_set(self, index: BitIndex) -> bool:
        """Read the element at index and compare it to the set sentinel."""
        client = self._require_open()
        self._check(index)
        try:
            value = client.lindex(self.key, index)
        except RedisError as e:
            raise TransportError(f"LINDEX {self.key}[{index}] failed: {e}") from e
        if value is None:
            raise TransportError(f"LINDEX {self.key}[{index}] returned no element")
        return _is_set_reply(value)

    def close(self) -> None:
        """Drop the client reference. The remote list is left in place."""
        if self._client is None:
            return
        self._client = None
        logger.debug(f"Released client for remote list {self.key}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
