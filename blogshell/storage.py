#!/usr/bin/env python3
"""
Key-value blob storage for blogshell state.

The filesystem store persists its whole state as one JSON string under a
single key. Backends only need to get and set strings by key; they know
nothing about the tree they hold.
"""

import os
from typing import Dict, Optional


class Storage:
    """Base class for string key-value storage backends."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        raise NotImplementedError


class MemoryStorage(Storage):
    """Storage that lives only as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileStorage(Storage):
    """
    Storage backed by a directory on the host, one ``<key>.json`` file per key.

    Errors from the host filesystem (missing permissions, a file where the
    directory should be) propagate as OSError; callers decide whether that
    is fatal.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def _path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path_for(key)
        # Write to a sibling and rename so a crash never leaves half a record
        tmp_path = path + '.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(value)
        os.replace(tmp_path, path)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if os.path.exists(path):
            os.remove(path)
