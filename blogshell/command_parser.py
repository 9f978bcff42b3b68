#!/usr/bin/env python3
"""
Command parser for the blogshell interpreter.

This module turns raw terminal lines into structured commands and
resolves path operands against the working directory. It never touches
the filesystem.

The grammar is deliberately small:
- Tokens are separated by runs of whitespace; there is no quoting
- The first token, lower-cased, is the verb
- The only redirection is echo's ``<content> > <file>``
"""

import re
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ParsedCommand:
    """A verb with its positional arguments."""
    verb: str
    args: List[str]
    raw: str

    def __str__(self) -> str:
        return ' '.join([self.verb] + self.args)


@dataclass
class Redirect:
    """Text to be written to a file by echo."""
    content: str
    target: str


class CommandParser:
    """Parser for the blogshell command line."""

    def __init__(self):
        self.whitespace_pattern = re.compile(r'\s+')
        # Lazy left side: split at the first '>'
        self.redirect_pattern = re.compile(r'^(.+?)\s*>\s*(.+)$')

    def parse(self, command_line: str) -> Optional[ParsedCommand]:
        """Parse a line into a command, or None if the line is blank."""
        trimmed = command_line.strip() if command_line else ''
        if not trimmed:
            return None

        tokens = self.whitespace_pattern.split(trimmed)
        return ParsedCommand(verb=tokens[0].lower(), args=tokens[1:], raw=trimmed)

    def parse_redirect(self, text: str) -> Optional[Redirect]:
        """Split echo text into content and target, or None if no '>' applies."""
        match = self.redirect_pattern.match(text)
        if not match:
            return None
        content, target = match.groups()
        return Redirect(content=content.strip(), target=target.strip())


def _segments(path: str) -> List[str]:
    return [part for part in path.split('/') if part]


def resolve_path(current_path: str, target_path: str) -> str:
    """
    Resolve target_path against current_path.

    Examples:
        resolve_path('/blog', '..')         -> '/'
        resolve_path('/blog/x', '../y')     -> '/blog/y'
        resolve_path('/', 'notes.txt')      -> '/notes.txt'
        resolve_path('/blog', '/tmp')       -> '/tmp'

    Only a leading '..' is interpreted; '..' further inside a relative path
    is passed through for the filesystem to reject.
    """
    if target_path.startswith('/'):
        return target_path

    if target_path == '.':
        return current_path

    if target_path == '..':
        parts = _segments(current_path)
        if parts:
            parts.pop()
        return '/' + '/'.join(parts)

    if target_path.startswith('../'):
        parts = _segments(current_path)
        for part in target_path.split('/'):
            if part == '..':
                if parts:
                    parts.pop()
            elif part and part != '.':
                parts.append(part)
        return '/' + '/'.join(parts)

    if current_path == '/':
        return f"/{target_path}"
    return f"{current_path}/{target_path}"
