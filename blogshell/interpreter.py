#!/usr/bin/env python3
"""
Command interpreter for blogshell.

Translates parsed command lines into filesystem and session operations
and formats what they return as terminal output. Every outcome, failure
included, comes back as a CommandResult; nothing raises past
handle_command.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .command_parser import CommandParser, resolve_path
from .filesystem import FileSystemStore
from .session import SessionState

logger = logging.getLogger(__name__)

DIRECTORY_MARKER = '\U0001F4C1 '
FILE_MARKER = '\U0001F4C4 '
MARKDOWN_SUFFIX = '.md'

HELP_TEXT = """Available commands:
  cd <path>       Change directory
  ls [path]       List directory contents
  pwd             Print working directory
  touch <file>    Create a new file
  mkdir <dir>     Create a new directory
  echo <text>     Output text (use > to redirect to file)
  cat <file>      Display file contents
  grep <pattern> <file>  Search for pattern in file
  rm <path>       Remove file or directory
  clear           Clear terminal history
  open <file>     Open markdown file in panel
  whoami          Display profile information
  help            Show this help message"""


@dataclass
class CommandResult:
    """Output text of a command and whether it describes a failure."""
    output: str = ''
    is_error: bool = False

    def __str__(self) -> str:
        return self.output


def _error(output: str) -> CommandResult:
    return CommandResult(output=output, is_error=True)


def title_from_filename(file_name: str) -> str:
    """'my-first-post.md' -> 'my first post'"""
    if file_name.endswith(MARKDOWN_SUFFIX):
        file_name = file_name[:-len(MARKDOWN_SUFFIX)]
    return file_name.replace('-', ' ')


class CommandInterpreter:
    """
    Executes command lines against a filesystem store and a session.

    Both collaborators are passed in, so separate interpreters never share
    state.
    """

    def __init__(self, fs: FileSystemStore, session: SessionState,
                 parser: Optional[CommandParser] = None):
        self.fs = fs
        self.session = session
        self.parser = parser or CommandParser()
        self.handlers: Dict[str, Callable[[List[str]], CommandResult]] = {
            'help': self._help,
            'clear': self._clear,
            'pwd': self._pwd,
            'cd': self._cd,
            'ls': self._ls,
            'touch': self._touch,
            'mkdir': self._mkdir,
            'echo': self._echo,
            'cat': self._cat,
            'grep': self._grep,
            'rm': self._rm,
            'open': self._open,
            'whoami': self._whoami,
        }

    @property
    def commands(self) -> List[str]:
        """Names of all supported verbs."""
        return sorted(self.handlers)

    def resolve(self, path: str) -> str:
        """Resolve a path operand against the current working directory."""
        return resolve_path(self.fs.current_path, path)

    def handle_command(self, command_line: str) -> CommandResult:
        """Execute one command line and return its result."""
        command = self.parser.parse(command_line)
        if command is None:
            return CommandResult()

        handler = self.handlers.get(command.verb)
        if handler is None:
            return _error(f"{command.verb}: command not found. "
                          f"Type 'help' for available commands.")

        try:
            return handler(command.args)
        except Exception as e:
            logger.exception("Unexpected failure running %r", command.raw)
            return _error(f"{command.verb}: {e}")

    # Session commands

    def _help(self, args: List[str]) -> CommandResult:
        return CommandResult(HELP_TEXT)

    def _clear(self, args: List[str]) -> CommandResult:
        self.session.clear_history()
        return CommandResult()

    def _whoami(self, args: List[str]) -> CommandResult:
        self.session.set_show_whoami_modal(True)
        return CommandResult()

    # Navigation

    def _pwd(self, args: List[str]) -> CommandResult:
        return CommandResult(self.fs.current_path)

    def _cd(self, args: List[str]) -> CommandResult:
        if not args:
            self.fs.set_current_path('/')
            return CommandResult()

        target = self.resolve(args[0])
        node = self.fs.get_node_at_path(target)
        if node is None:
            return _error(f"cd: {args[0]}: No such file or directory")
        if not node.is_dir():
            return _error(f"cd: {args[0]}: Not a directory")

        self.fs.set_current_path(target)
        return CommandResult()

    def _ls(self, args: List[str]) -> CommandResult:
        target = self.resolve(args[0]) if args else self.fs.current_path
        nodes = self.fs.list_directory(target)
        if nodes is None:
            shown = args[0] if args else '.'
            return _error(f"ls: cannot access '{shown}': No such file or directory")

        lines = [(DIRECTORY_MARKER if node.is_dir() else FILE_MARKER) + node.name
                 for node in nodes]
        return CommandResult('\n'.join(lines))

    # File operations

    def _touch(self, args: List[str]) -> CommandResult:
        if not args:
            return _error("touch: missing file operand")
        if not self.fs.create_file(self.resolve(args[0])):
            return _error(f"touch: cannot create file '{args[0]}'")
        return CommandResult()

    def _mkdir(self, args: List[str]) -> CommandResult:
        if not args:
            return _error("mkdir: missing directory operand")
        if not self.fs.create_directory(self.resolve(args[0])):
            return _error(f"mkdir: cannot create directory '{args[0]}'")
        return CommandResult()

    def _rm(self, args: List[str]) -> CommandResult:
        if not args:
            return _error("rm: missing file operand")
        if not self.fs.delete_node(self.resolve(args[0])):
            return _error(f"rm: cannot remove '{args[0]}'")
        return CommandResult()

    def _echo(self, args: List[str]) -> CommandResult:
        text = ' '.join(args)
        redirect = self.parser.parse_redirect(text)
        if redirect is None:
            return CommandResult(text)

        target = self.resolve(redirect.target)
        if self.fs.get_node_at_path(target) is not None:
            if not self.fs.write_file(target, redirect.content):
                return _error(f"echo: cannot write to '{redirect.target}'")
        elif not self.fs.create_file(target, redirect.content):
            return _error(f"echo: cannot create file '{redirect.target}'")
        return CommandResult()

    def _cat(self, args: List[str]) -> CommandResult:
        if not args:
            return _error("cat: missing file operand")
        content = self.fs.read_file(self.resolve(args[0]))
        if content is None:
            return _error(f"cat: {args[0]}: No such file or directory")
        return CommandResult(content)

    def _grep(self, args: List[str]) -> CommandResult:
        if len(args) < 2:
            return _error("grep: missing pattern or file operand")

        pattern, file_name = args[0], args[1]
        content = self.fs.read_file(self.resolve(file_name))
        if content is None:
            return _error(f"grep: {file_name}: No such file or directory")

        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error:
            return _error(f"grep: invalid pattern '{pattern}'")

        matches = [line for line in content.split('\n') if regex.search(line)]
        return CommandResult('\n'.join(matches))

    def _open(self, args: List[str]) -> CommandResult:
        if not args:
            return _error("open: missing file operand")

        path = args[0]
        if not path.endswith(MARKDOWN_SUFFIX):
            return _error(f"open: {path}: Not a markdown file")

        content = self.fs.read_file(self.resolve(path))
        if content is None:
            return _error(f"open: {path}: No such file or directory")

        file_name = path.split('/')[-1] or path
        self.session.open_blog_panel(content, title_from_filename(file_name))
        return CommandResult(f"Opening {file_name}...")
