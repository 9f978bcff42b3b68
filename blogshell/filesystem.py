#!/usr/bin/env python3
"""
blogshell.filesystem - An in-memory virtual filesystem with durable state.

Core philosophy:
- One mutable tree of named nodes, rooted at a directory called "root"
- Every mutation touches the modification time of the changed node and
  every ancestor up to the root
- The whole tree is persisted as a single JSON record after each mutation
- Failures are reported as False/None, never raised to the caller
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Callable, Any

from .storage import Storage, MemoryStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = 'terminal-filesystem'
ROOT_NAME = 'root'
BLOG_DIR = 'blog'

# Directories directly under root that can never be removed
PROTECTED_NAMES = frozenset({BLOG_DIR})


class NodeKind(str, Enum):
    """The two kinds of filesystem entry."""
    FILE = 'file'
    DIRECTORY = 'directory'


def now() -> datetime:
    """Current UTC time, truncated to the millisecond precision we persist."""
    current = datetime.now(timezone.utc)
    return current.replace(microsecond=(current.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as ISO-8601 with milliseconds and a Z suffix."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Inverse of format_timestamp. Naive values are taken as UTC."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Node:
    """
    A filesystem entry.

    Files carry ``content`` and have ``children`` set to None; directories
    carry ``children`` (name -> Node) and have ``content`` set to None.
    """
    name: str
    kind: NodeKind
    created_at: datetime
    modified_at: datetime
    content: Optional[str] = None
    children: Optional[Dict[str, 'Node']] = None

    @classmethod
    def new_file(cls, name: str, content: str = '') -> 'Node':
        """Create a file node stamped with the current time."""
        stamp = now()
        return cls(name=name, kind=NodeKind.FILE, created_at=stamp,
                   modified_at=stamp, content=content)

    @classmethod
    def new_directory(cls, name: str) -> 'Node':
        """Create an empty directory node stamped with the current time."""
        stamp = now()
        return cls(name=name, kind=NodeKind.DIRECTORY, created_at=stamp,
                   modified_at=stamp, children={})

    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    def to_dict(self) -> dict:
        """Convert node (and its subtree) to a JSON-ready dictionary."""
        d: Dict[str, Any] = {'name': self.name, 'type': self.kind.value}
        if self.is_file():
            d['content'] = self.content or ''
        else:
            d['children'] = {name: child.to_dict()
                             for name, child in (self.children or {}).items()}
        d['createdAt'] = format_timestamp(self.created_at)
        d['modifiedAt'] = format_timestamp(self.modified_at)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> 'Node':
        """Rebuild a node from to_dict output, reviving timestamps recursively."""
        kind = NodeKind(data['type'])
        node = cls(
            name=data['name'],
            kind=kind,
            created_at=parse_timestamp(data['createdAt']),
            modified_at=parse_timestamp(data['modifiedAt']),
        )
        if kind == NodeKind.FILE:
            node.content = data.get('content') or ''
        else:
            node.children = {name: cls.from_dict(child)
                             for name, child in (data.get('children') or {}).items()}
        return node


def create_default_root() -> Node:
    """The tree every fresh session starts with: root holding an empty blog."""
    root = Node.new_directory(ROOT_NAME)
    root.children[BLOG_DIR] = Node.new_directory(BLOG_DIR)
    return root


@dataclass
class FileSystemState:
    """The persisted unit: the tree plus the working directory."""
    root: Node
    current_path: str = '/'

    def to_dict(self) -> dict:
        return {'root': self.root.to_dict(), 'currentPath': self.current_path}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'FileSystemState':
        data = json.loads(json_str)
        root = Node.from_dict(data['root'])
        if not root.is_dir():
            raise ValueError("stored root is not a directory")
        return cls(root=root, current_path=data.get('currentPath') or '/')


class FileSystemStore:
    """
    Owner of the virtual filesystem tree.

    Paths are '/'-separated. A path that does not start with '/' is taken
    relative to ``current_path``. Only this class mutates the tree, and
    every successful mutation is written through to ``storage``.
    """

    def __init__(self, storage: Optional[Storage] = None,
                 storage_key: str = STORAGE_KEY):
        self.storage = storage if storage is not None else MemoryStorage()
        self.storage_key = storage_key
        self.state = self._load()

    @property
    def root(self) -> Node:
        return self.state.root

    @property
    def current_path(self) -> str:
        return self.state.current_path

    # Persistence

    def _load(self) -> FileSystemState:
        """Revive state from storage, falling back to the default tree."""
        try:
            stored = self.storage.get_item(self.storage_key)
            if stored:
                return FileSystemState.from_json(stored)
        except Exception as e:
            logger.error("Failed to load file system from storage: %s", e)
        return FileSystemState(root=create_default_root())

    def _save(self) -> None:
        """Write the whole state through to storage; failures are only logged."""
        try:
            self.storage.set_item(self.storage_key, self.state.to_json())
        except Exception as e:
            logger.error("Failed to save file system to storage: %s", e)

    def to_json(self) -> str:
        """Serialize the current state to the persisted JSON format."""
        return self.state.to_json()

    @classmethod
    def from_json(cls, json_str: str, storage: Optional[Storage] = None,
                  storage_key: str = STORAGE_KEY) -> 'FileSystemStore':
        """Build a store from a JSON snapshot, bypassing what storage holds."""
        store = cls.__new__(cls)
        store.storage = storage if storage is not None else MemoryStorage()
        store.storage_key = storage_key
        store.state = FileSystemState.from_json(json_str)
        return store

    # Path helpers

    def _split_path(self, path: str) -> List[str]:
        """Absolute path segments for path, with empty segments dropped."""
        if not path.startswith('/'):
            path = f"{self.state.current_path}/{path}"
        return [part for part in path.split('/') if part]

    def _resolve_chain(self, parts: List[str]) -> Optional[List[Node]]:
        """Nodes from root down to the node at parts, or None if unreachable."""
        chain = [self.state.root]
        for part in parts:
            children = chain[-1].children
            if not children or part not in children:
                return None
            chain.append(children[part])
        return chain

    @staticmethod
    def _touch(chain: List[Node]) -> None:
        stamp = now()
        for node in chain:
            node.modified_at = stamp

    # Queries

    def get_node_at_path(self, path: str) -> Optional[Node]:
        """Return the node at path, the root for '/' or '', or None."""
        chain = self._resolve_chain(self._split_path(path))
        return chain[-1] if chain else None

    def read_file(self, path: str) -> Optional[str]:
        """Return file content, or None if path is missing or not a file."""
        node = self.get_node_at_path(path)
        if node is None or not node.is_file():
            return None
        return node.content or ''

    def list_directory(self, path: str) -> Optional[List[Node]]:
        """Children of a directory, directories first, then by name."""
        node = self.get_node_at_path(path)
        if node is None or not node.is_dir() or node.children is None:
            return None
        return sorted(node.children.values(),
                      key=lambda child: (not child.is_dir(), child.name))

    # Mutations

    def set_current_path(self, path: str) -> None:
        """Replace the working directory verbatim. No existence check."""
        self.state.current_path = path
        self._save()

    def _insert(self, path: str, factory: Callable[[str], Node]) -> bool:
        parts = self._split_path(path)
        if not parts:
            return False
        name = parts.pop()

        chain = self._resolve_chain(parts)
        if chain is None:
            return False

        parent = chain[-1]
        if not parent.is_dir() or name in parent.children:
            return False

        parent.children[name] = factory(name)
        self._touch(chain)
        logger.debug("Created %s under /%s", name, '/'.join(parts))
        self._save()
        return True

    def create_file(self, path: str, content: str = '') -> bool:
        """Create a file. False if the parent is unusable or the name is taken."""
        return self._insert(path, lambda name: Node.new_file(name, content))

    def create_directory(self, path: str) -> bool:
        """Create an empty directory, with the same rules as create_file."""
        return self._insert(path, Node.new_directory)

    def delete_node(self, path: str) -> bool:
        """
        Remove a file or a whole directory subtree.

        Returns False for the root, for /blog, and for targets that do not
        exist.
        """
        parts = self._split_path(path)
        if not parts:
            return False
        name = parts.pop()

        if not parts and name in PROTECTED_NAMES:
            return False

        chain = self._resolve_chain(parts)
        if chain is None:
            return False

        parent = chain[-1]
        if not parent.is_dir() or name not in parent.children:
            return False

        del parent.children[name]
        self._touch(chain)
        logger.debug("Deleted %s from /%s", name, '/'.join(parts))
        self._save()
        return True

    def write_file(self, path: str, content: str) -> bool:
        """Replace the content of an existing file. False if there is none."""
        parts = self._split_path(path)
        if not parts:
            return False

        chain = self._resolve_chain(parts)
        if chain is None or not chain[-1].is_file():
            return False

        chain[-1].content = content
        self._touch(chain)
        logger.debug("Wrote %d characters to /%s", len(content), '/'.join(parts))
        self._save()
        return True

    def reset_file_system(self) -> None:
        """Throw away everything and start over from the default tree."""
        self.state = FileSystemState(root=create_default_root())
        logger.info("File system reset to default tree")
        self._save()
