"""File-persisted bit vector.

Wraps a MemoryBitVector and persists it as a gzip-compressed, self-describing
snapshot. State is loaded once on construction and written once on close.
"""

from __future__ import annotations

import gzip
import logging
import os
import struct
import zlib
from pathlib import Path

from ..core.config import validate_compress_level
from ..core.errors import StorageError
from ..core.types import BitIndex
from .memory import MemoryBitVector

logger = logging.getLogger(__name__)

# Snapshot format (inside the gzip stream):
# [magic (4B)] [version (1B)] [hash_count (4B)] [capacity_bits (8B)] [word_count (8B)]
# [words (word_count x 8B, little-endian)] [crc32 of words (4B)]
MAGIC = b"BLMF"
VERSION = 1
HEADER = struct.Struct("<4sBIQQ")
CRC = struct.Struct("<I")


def encode_snapshot(bits: MemoryBitVector, hash_count: int) -> bytes:
    """Serialize bits and the filter parameters to the uncompressed snapshot."""
    payload = bits.to_bytes()
    header = HEADER.pack(MAGIC, VERSION, hash_count, bits.capacity, bits.word_count)
    return header + payload + CRC.pack(zlib.crc32(payload))


def decode_snapshot(data: bytes, capacity: int, hash_count: int) -> MemoryBitVector:
    """Parse an uncompressed snapshot, checking it matches (capacity, hash_count)."""
    if len(data) < HEADER.size + CRC.size:
        raise StorageError(f"Snapshot truncated: {len(data)} bytes")

    magic, version, stored_k, stored_n, words = HEADER.unpack_from(data)
    if magic != MAGIC:
        raise StorageError(f"Invalid magic: {magic!r}")
    if version != VERSION:
        raise StorageError(f"Unsupported snapshot version: {version}")
    if stored_n != capacity or stored_k != hash_count:
        raise StorageError(
            f"Snapshot parameters n={stored_n}, k={stored_k} "
            f"do not match requested n={capacity}, k={hash_count}"
        )

    end = HEADER.size + words * 8
    if len(data) != end + CRC.size:
        raise StorageError(f"Snapshot length {len(data)} does not match {words} words")

    payload = data[HEADER.size:end]
    (stored_crc,) = CRC.unpack_from(data, end)
    computed_crc = zlib.crc32(payload)
    if stored_crc != computed_crc:
        raise StorageError(f"CRC mismatch: expected {computed_crc:x}, got {stored_crc:x}")

    return MemoryBitVector.from_bytes(capacity, payload)


class FileBitVector:
    """Bit vector loaded from and flushed to a single file.

    Args:
        path: Target snapshot file
        capacity: Number of addressable bits
        hash_count: Hash count of the owning filter, recorded in the snapshot
        compress_level: gzip compression level used on flush

    Invariants:
        - A missing file starts an all-zero vector
        - An unreadable or mismatched file aborts construction
        - Flush is atomic via write-temp-then-rename
    """

    def __init__(self, path: str | Path, capacity: int, hash_count: int, compress_level: int = 6):
        validate_compress_level(compress_level)
        self.path = Path(path)
        self.capacity = capacity
        self.hash_count = hash_count
        self.compress_level = compress_level
        self._memory: MemoryBitVector | None = self._load()

    def _load(self) -> MemoryBitVector:
        """Read the snapshot at path, or start empty if there is none."""
        try:
            with gzip.open(self.path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            logger.debug(f"No existing snapshot at {self.path}, starting empty")
            return MemoryBitVector(self.capacity)
        except (OSError, EOFError, zlib.error) as e:
            logger.error(f"Failed to read snapshot {self.path}: {e}")
            raise StorageError(f"Failed to read snapshot {self.path}: {e}") from e

        try:
            memory = decode_snapshot(data, self.capacity, self.hash_count)
        except StorageError as e:
            logger.error(f"Failed to decode snapshot {self.path}: {e}")
            raise

        logger.info(f"Loaded snapshot {self.path} ({memory.bit_count()} bits set)")
        return memory

    def flush(self) -> None:
        """Write the current bits to path atomically.

        A symlink at path is kept; the file it points to is replaced.
        """
        bits = self._require_open()
        data = encode_snapshot(bits, self.hash_count)
        target = self.path.resolve()
        temp_path = target.with_name(target.name + ".tmp")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "wb") as f:
                with gzip.GzipFile(fileobj=f, mode="wb", compresslevel=self.compress_level) as gz:
                    gz.write(data)
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename
            os.replace(temp_path, target)
        except OSError as e:
            logger.error(f"Failed to flush snapshot {self.path}: {e}")
            self._discard(temp_path)
            raise StorageError(f"Failed to flush snapshot {self.path}: {e}") from e
        except Exception:
            self._discard(temp_path)
            raise

        logger.debug(f"Flushed {len(data)} bytes to {target}")

    @staticmethod
    def _discard(temp_path: Path) -> None:
        if temp_path.exists():
            temp_path.unlink()

    def _require_open(self) -> MemoryBitVector:
        if self._memory is None:
            raise RuntimeError("Bit vector is closed")
        return self._memory

    def set(self, index: BitIndex) -> None:
        self._require_open().set(index)

    def unset(self, index: BitIndex) -> None:
        self._require_open().unset(index)

    def is_set(self, index: BitIndex) -> bool:
        return self._require_open().is_set(index)

    def bit_count(self) -> int:
        return self._require_open().bit_count()

    def close(self) -> None:
        """Flush to disk, then release the in-memory buffer."""
        if self._memory is None:
            return
        self.flush()
        self._memory.close()
        self._memory = None
        logger.info(f"Closed snapshot {self.path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
