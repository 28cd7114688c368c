"""Protocols implemented by bloomkit components."""

from .bitvector import BitVector
from .client import ListClient
from .filter import Filter

__all__ = ["BitVector", "ListClient", "Filter"]
