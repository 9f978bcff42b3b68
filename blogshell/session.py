#!/usr/bin/env python3
"""
Session state for a blogshell terminal.

Holds what belongs to one sitting at the terminal rather than to the
filesystem: the transcript of commands and outputs, whether the blog panel
or the profile modal is showing, and when the session began.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class TerminalHistoryEntry:
    """One command together with the output it produced."""
    command: str
    output: str
    timestamp: datetime = field(default_factory=datetime.now)
    is_error: bool = False


class SessionState:
    """Mutable state the interpreter signals and the terminal renders."""

    def __init__(self):
        self.history: List[TerminalHistoryEntry] = []
        self.session_start_time = datetime.now()
        self.show_whoami_modal = False
        self.blog_panel_open = False
        self.current_blog_content: Optional[str] = None
        self.current_blog_title: Optional[str] = None

    def add_history(self, command: str, output: str, is_error: bool = False) -> None:
        """Append an entry to the transcript."""
        self.history.append(TerminalHistoryEntry(command, output, is_error=is_error))

    def clear_history(self) -> None:
        self.history = []

    def set_show_whoami_modal(self, show: bool) -> None:
        self.show_whoami_modal = show

    def open_blog_panel(self, content: str, title: str) -> None:
        """Show a markdown document in the blog panel."""
        self.blog_panel_open = True
        self.current_blog_content = content
        self.current_blog_title = title

    def close_blog_panel(self) -> None:
        self.blog_panel_open = False
        self.current_blog_content = None
        self.current_blog_title = None

    def session_duration(self, now: Optional[datetime] = None) -> str:
        """Time since the session started, formatted as HH:MM:SS."""
        elapsed = (now or datetime.now()) - self.session_start_time
        total = max(int(elapsed.total_seconds()), 0)
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
