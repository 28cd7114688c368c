"""Shared fixtures for bloomkit tests."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

import pytest
from redis.exceptions import ResponseError


class InMemoryListClient:
    """Process-local stand-in for the redis list commands the remote backend uses."""

    def __init__(self):
        self.lists: dict[str, list[bytes]] = {}
        self.commands: list[str] = []

    @staticmethod
    def _encode(value) -> bytes:
        if isinstance(value, bytes):
            return value
        return str(value).encode()

    def llen(self, name):
        self.commands.append("LLEN")
        return len(self.lists.get(name, []))

    def delete(self, *names):
        self.commands.append("DEL")
        removed = 0
        for name in names:
            if self.lists.pop(name, None) is not None:
                removed += 1
        return removed

    def rpush(self, name, *values):
        self.commands.append("RPUSH")
        items = self.lists.setdefault(name, [])
        items.extend(self._encode(v) for v in values)
        return len(items)

    def lset(self, name, index, value):
        self.commands.append("LSET")
        items = self.lists.get(name)
        if items is None:
            raise ResponseError("no such key")
        if not -len(items) <= index < len(items):
            raise ResponseError("index out of range")
        items[index] = self._encode(value)
        return True

    def lindex(self, name, index):
        self.commands.append("LINDEX")
        items = self.lists.get(name, [])
        if not -len(items) <= index < len(items):
            return None
        return items[index]


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def list_client():
    """Fresh in-memory list client."""
    return InMemoryListClient()
