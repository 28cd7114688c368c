"""Configuration for bloomkit.

Defines all tunable parameters for building a filter and its backend.
"""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

BACKENDS = ("memory", "file", "remote")

# One 32-bit hash seed per hash function; the snapshot header stores k as u32
MAX_HASH_COUNT = 0xFFFFFFFF


@dataclass
class BloomConfig:
    """Configuration parameters for a bloom filter.

    Attributes:
        capacity_bits: Number of addressable bits (n)
        hash_count: Number of bit positions per key (k)
        backend: One of "memory", "file", "remote"
        path: Target file for the file backend
        remote_key_prefix: Prefix of the shared remote list key
        remote_init_batch: Elements pushed per command when (re)creating the remote list
        compress_level: gzip level used when flushing the file backend
    """

    capacity_bits: int
    hash_count: int
    backend: str = "memory"
    path: str | None = None
    remote_key_prefix: str = "_bloomfilter"
    remote_init_batch: int = 10_000
    compress_level: int = 6

    def validate(self) -> None:
        """Raise ConfigurationError if any parameter is out of range."""
        validate_parameters(self.capacity_bits, self.hash_count)
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"Unknown backend: {self.backend!r}")
        validate_init_batch(self.remote_init_batch)
        validate_compress_level(self.compress_level)


def validate_parameters(capacity_bits: int, hash_count: int) -> None:
    """Reject a non-positive capacity or hash count, or one past the seed range."""
    if isinstance(capacity_bits, bool) or not isinstance(capacity_bits, int) or capacity_bits < 1:
        raise ConfigurationError(f"capacity_bits must be a positive integer, got {capacity_bits!r}")
    if isinstance(hash_count, bool) or not isinstance(hash_count, int) or hash_count < 1:
        raise ConfigurationError(f"hash_count must be a positive integer, got {hash_count!r}")
    if hash_count > MAX_HASH_COUNT:
        raise ConfigurationError(f"hash_count too large for 32-bit seeds: {hash_count}")


def validate_compress_level(compress_level: int) -> None:
    if isinstance(compress_level, bool) or not isinstance(compress_level, int) or not 0 <= compress_level <= 9:
        raise ConfigurationError(f"compress_level must be in 0..9, got {compress_level!r}")


def validate_init_batch(init_batch: int) -> None:
    if isinstance(init_batch, bool) or not isinstance(init_batch, int) or init_batch < 1:
        raise ConfigurationError(f"remote_init_batch must be >= 1, got {init_batch!r}")


def optimal_parameters(expected_elements: int, false_positive_rate: float = 0.01) -> tuple[int, int]:
    """Return (capacity_bits, hash_count) sized for the expected load.

    m = -n * ln(p) / (ln(2)^2)
    k = (m/n) * ln(2)
    """
    if expected_elements < 1:
        raise ConfigurationError(f"expected_elements must be >= 1, got {expected_elements}")
    if not 0 < false_positive_rate < 1:
        raise ConfigurationError(f"false_positive_rate must be in (0, 1), got {false_positive_rate}")

    m = max(1, math.ceil(-expected_elements * math.log(false_positive_rate) / (math.log(2) ** 2)))
    k = max(1, round((m / expected_elements) * math.log(2)))
    return m, k


def load_config(path: str | Path) -> BloomConfig:
    """Load a BloomConfig from the [bloom] table of a TOML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))

    table = data.get("bloom")
    if not isinstance(table, dict):
        raise ConfigurationError(f"Missing [bloom] table in {path}")

    known = {f.name for f in fields(BloomConfig)}
    unknown = set(table) - known
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {path}: {sorted(unknown)}")

    try:
        config = BloomConfig(**table)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [bloom] table in {path}: {e}") from e
    config.validate()
    return config
