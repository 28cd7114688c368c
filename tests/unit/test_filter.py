"""Unit tests for the bloom filter engine."""

import pytest

from bloomkit import (
    BloomFilter,
    ConfigurationError,
    ErrorKind,
    HashFamily,
    MemoryBitVector,
    new_file_filter,
    new_memory_filter,
    new_remote_filter,
)


def test_put_then_has():
    bf = new_memory_filter(10_000, 4)
    bf.put(b"alpha")
    bf.put_string("beta")

    assert bf.has(b"alpha")
    assert bf.has_string("alpha")
    assert bf.has(b"beta")
    assert "beta" in bf
    assert b"alpha" in bf


def test_empty_filter_has_nothing():
    bf = new_memory_filter(10_000, 4)

    for i in range(100):
        assert not bf.has_string(f"key{i}")


def test_put_sets_exactly_the_hashed_bits():
    bf = new_memory_filter(4096, 3)
    bf.put(b"key")

    expected = set(HashFamily().hashes(b"key", 3, 4096))
    assert bf.bits.bit_count() == len(expected)
    for index in expected:
        assert bf.bits.is_set(index)


def test_put_is_idempotent():
    bf = new_memory_filter(4096, 5)
    bf.put(b"key")
    once = bf.bits.to_bytes()
    bf.put(b"key")

    assert bf.bits.to_bytes() == once


def test_has_short_circuits():
    class CountingBits(MemoryBitVector):
        def __init__(self, capacity):
            super().__init__(capacity)
            self.reads = 0

        def is_set(self, index):
            self.reads += 1
            return super().is_set(index)

    bits = CountingBits(1 << 20)
    bf = BloomFilter(bits, 1 << 20, 8)

    assert not bf.has(b"absent")
    assert bits.reads == 1


def test_put_many_accepts_bytes_and_str():
    bf = new_memory_filter(10_000, 3)
    bf.put_many([b"one", "two", "three"])

    assert bf.has(b"one")
    assert bf.has_string("two")
    assert bf.has(b"three")


def test_properties():
    bf = new_memory_filter(1000, 7)
    assert bf.capacity_bits == 1000
    assert bf.hash_count == 7


@pytest.mark.parametrize("n,k", [(0, 3), (-1, 3), (100, 0), (100, -2)])
def test_invalid_parameters_rejected_for_every_backend(n, k, temp_dir, list_client):
    with pytest.raises(ConfigurationError) as exc_info:
        new_memory_filter(n, k)
    assert exc_info.value.kind is ErrorKind.CONFIGURATION

    with pytest.raises(ConfigurationError):
        new_file_filter(temp_dir / "bloom.gz", n, k)

    with pytest.raises(ConfigurationError):
        new_remote_filter(list_client, n, k)

    # Nothing touched the remote store
    assert list_client.commands == []


def test_capacity_mismatch_rejected():
    with pytest.raises(ConfigurationError):
        BloomFilter(MemoryBitVector(64), 128, 3)


def test_close_releases_memory():
    with new_memory_filter(128, 2) as bf:
        bf.put(b"x")

    with pytest.raises(RuntimeError):
        bf.has(b"x")


def test_remote_filters_with_same_parameters_share_state(list_client):
    writer = new_remote_filter(list_client, 2000, 5)
    writer.put_string("shared")
    writer.close()

    reader = new_remote_filter(list_client, 2000, 5)
    assert reader.has_string("shared")

    other = new_remote_filter(list_client, 2000, 4)
    assert not other.has_string("shared")
    assert set(list_client.lists) == {"_bloomfilter:n2000:k5", "_bloomfilter:n2000:k4"}


@pytest.mark.parametrize("n,k", [(True, 3), (100, True), (100, 2**32)])
def test_degenerate_parameters_rejected_at_construction(n, k):
    with pytest.raises(ConfigurationError):
        new_memory_filter(n, k)


def test_file_factory_rejects_bad_compress_level(temp_dir):
    path = temp_dir / "bloom.gz"

    with pytest.raises(ConfigurationError):
        new_file_filter(path, 1024, 3, compress_level=42)
    assert list(temp_dir.iterdir()) == []


def test_remote_factory_rejects_bad_init_batch(list_client):
    with pytest.raises(ConfigurationError):
        new_remote_filter(list_client, 100, 2, init_batch=0)
    assert list_client.commands == []
