"""bloomkit - Bloom filters over memory, file, and remote-list storage."""

from .components.file import FileBitVector
from .components.hashing import HashFamily
from .components.memory import MemoryBitVector
from .components.remote import RemoteBitVector
from .core.config import BloomConfig, load_config, optimal_parameters
from .core.errors import (
    BloomError,
    ErrorKind,
    ConfigurationError,
    StorageError,
    TransportError,
    BitIndexError,
)
from .core.filter import (
    BloomFilter,
    new_memory_filter,
    new_file_filter,
    new_remote_filter,
    open_filter,
)
from .core.types import Key, BitIndex

__all__ = [
    "BloomConfig",
    "load_config",
    "optimal_parameters",
    "BloomError",
    "ErrorKind",
    "ConfigurationError",
    "StorageError",
    "TransportError",
    "BitIndexError",
    "BloomFilter",
    "new_memory_filter",
    "new_file_filter",
    "new_remote_filter",
    "open_filter",
    "HashFamily",
    "MemoryBitVector",
    "FileBitVector",
    "RemoteBitVector",
    "Key",
    "BitIndex",
]
