"""Hash family and bit vector backends."""

from .file import FileBitVector
from .hashing import HashFamily
from .memory import MemoryBitVector
from .remote import RemoteBitVector

__all__ = ["HashFamily", "MemoryBitVector", "FileBitVector", "RemoteBitVector"]
