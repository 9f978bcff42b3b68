"""
blogshell - A simulated shell over a persistent virtual filesystem

This package provides an in-memory virtual filesystem whose state is kept
in a key-value store, a command interpreter that mimics a handful of POSIX
utilities on top of it, and a small terminal front end that serves a
markdown blog from /blog.
"""

__version__ = "0.1.0"

from .filesystem import (
    FileSystemStore,
    FileSystemState,
    Node,
    NodeKind,
)

from .storage import (
    Storage,
    MemoryStorage,
    FileStorage,
)

from .session import (
    SessionState,
    TerminalHistoryEntry,
)

from .command_parser import (
    CommandParser,
    ParsedCommand,
    Redirect,
    resolve_path,
)

from .interpreter import (
    CommandInterpreter,
    CommandResult,
)

from .content import (
    BlogPost,
    bundled_posts,
    load_blog_posts,
    load_profile,
)

from .terminal import (
    TerminalSession,
    TerminalConfig,
)

__all__ = [
    # Filesystem
    "FileSystemStore",
    "FileSystemState",
    "Node",
    "NodeKind",

    # Storage backends
    "Storage",
    "MemoryStorage",
    "FileStorage",

    # Session state
    "SessionState",
    "TerminalHistoryEntry",

    # Command parsing and interpretation
    "CommandParser",
    "ParsedCommand",
    "Redirect",
    "resolve_path",
    "CommandInterpreter",
    "CommandResult",

    # Content
    "BlogPost",
    "bundled_posts",
    "load_blog_posts",
    "load_profile",

    # Terminal
    "TerminalSession",
    "TerminalConfig",

    # Version info
    "__version__",
]
