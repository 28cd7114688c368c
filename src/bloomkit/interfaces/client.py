"""Protocol definition for the remote ordered-list store.

Method names follow redis-py so a redis.Redis instance satisfies it as is.
"""

from __future__ import annotations

from typing import Any, Protocol


class ListClient(Protocol):
    """The five list commands the remote backend issues."""

    def llen(self, name: str) -> int:
        """Return the length of the list at name (0 if absent)."""
        ...

    def delete(self, *names: str) -> int:
        """Delete the given keys."""
        ...

    def rpush(self, name: str, *values: Any) -> int:
        """Append values to the list at name, creating it if absent."""
        ...

    def lset(self, name: str, index: int, value: Any) -> Any:
        """Overwrite the element at index."""
        ...

    def lindex(self, name: str, index: int) -> bytes | str | None:
        """Return the element at index, or None if out of range."""
        ...
