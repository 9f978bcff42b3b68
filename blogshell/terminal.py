#!/usr/bin/env python3
"""
Terminal front end for blogshell.

This module provides the REPL that sits on top of the interpreter. It
owns the session objects, records every command in the session history,
and turns the interpreter's panel and modal signals into plain text.

Design Principles:
- The interpreter does the work; the terminal only reads and prints
- State is persisted by the filesystem store, not here
- Usable non-interactively through run_command and run_script
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List

from .content import load_blog_posts, load_profile
from .filesystem import FileSystemStore, STORAGE_KEY
from .interpreter import CommandInterpreter, CommandResult
from .session import SessionState
from .storage import FileStorage, MemoryStorage

logger = logging.getLogger(__name__)

WELCOME_LINES = [
    "Welcome to the Terminal Portfolio!",
    "Type 'help' to see available commands.",
    "Type 'whoami' to learn more about me.",
]

EXIT_COMMANDS = ('exit', 'quit')


@dataclass
class TerminalConfig:
    """Configuration for a terminal session."""
    user: str = 'user'
    hostname: str = 'terminal'
    state_dir: Optional[str] = None  # None keeps state in memory only
    storage_key: str = STORAGE_KEY
    reset_state: bool = False
    seed_blog: bool = True
    enable_colors: bool = True


class TerminalSession:
    """
    Main terminal session manager.

    Builds the filesystem store, session state and interpreter, and
    provides the REPL loop around them.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 fs: Optional[FileSystemStore] = None):
        """Initialize terminal session."""
        self.config = config or TerminalConfig()
        if fs is None:
            if self.config.state_dir:
                storage = FileStorage(self.config.state_dir)
            else:
                storage = MemoryStorage()
            fs = FileSystemStore(storage, self.config.storage_key)
        self.fs = fs
        self.session = SessionState()
        self.interpreter = CommandInterpreter(self.fs, self.session)
        self.running = False

        if self.config.reset_state:
            self.fs.reset_file_system()
        if self.config.seed_blog:
            load_blog_posts(self.fs)

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        cwd = self.fs.current_path
        display_cwd = '~' if cwd == '/' else cwd

        if self.config.enable_colors:
            return f'\033[32m{self.config.user}@{self.config.hostname}:{display_cwd}$\033[0m '
        return f'{self.config.user}@{self.config.hostname}:{display_cwd}$ '

    def render_signals(self) -> str:
        """Render and acknowledge any open panel or modal as text."""
        blocks = []

        if self.session.blog_panel_open:
            title = self.session.current_blog_title or ''
            content = self.session.current_blog_content or ''
            blocks.append(f"== {title} ==\n\n{content.rstrip()}")
            self.session.close_blog_panel()

        if self.session.show_whoami_modal:
            blocks.append(load_profile().rstrip())
            self.session.set_show_whoami_modal(False)

        return '\n\n'.join(blocks)

    def execute(self, command_line: str) -> Optional[CommandResult]:
        """
        Execute a command line, recording it in the session history.

        Returns None for exit commands. Panel and modal output is appended
        to the command's own output.
        """
        if not command_line or command_line.strip() == '':
            return CommandResult()

        if command_line.strip().lower() in EXIT_COMMANDS:
            return None

        result = self.interpreter.handle_command(command_line)
        self.session.add_history(command_line, result.output, result.is_error)

        signals = self.render_signals()
        if signals:
            output = '\n\n'.join(part for part in (result.output, signals) if part)
            result = CommandResult(output=output, is_error=result.is_error)
        return result

    def execute_command(self, command_line: str) -> Optional[str]:
        """Execute a command line and return its text, or None on exit."""
        result = self.execute(command_line)
        return None if result is None else result.output

    def run_interactive(self):
        """Run the interactive REPL loop."""
        self.running = True

        for line in WELCOME_LINES:
            print(line)
        print()

        while self.running:
            try:
                command_line = input(self.get_prompt())
                result = self.execute(command_line)

                if result is None:
                    break

                if result.output:
                    if result.is_error and self.config.enable_colors:
                        print(f'\033[31m{result.output}\033[0m')
                    else:
                        print(result.output)

            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print()
                break
            except Exception as e:
                logger.exception("Unhandled error in terminal loop")
                print(f"Error: {e}")

        self.running = False
        print(f"Session: {self.session.session_duration()}")
        print("Goodbye!")

    def run_command(self, command_line: str) -> str:
        """
        Run a single command and return output.

        This method is useful for non-interactive use.
        """
        output = self.execute_command(command_line)
        return output if output is not None else ''

    def run_script(self, script_lines: List[str]) -> List[str]:
        """
        Run a script (list of command lines) and return outputs.
        """
        outputs = []
        for line in script_lines:
            # Skip comments and empty lines
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            output = self.execute_command(line)
            if output is None:  # Exit command
                break
            outputs.append(output)

        return outputs


def main():
    """Main entry point for the blogshell terminal."""
    import argparse

    parser = argparse.ArgumentParser(description='blogshell terminal')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('--state-dir', help='Directory holding persisted state',
                        default=str(Path.home() / '.blogshell'))
    parser.add_argument('--memory', action='store_true',
                        help='Keep state in memory only')
    parser.add_argument('--reset', action='store_true',
                        help='Reset the filesystem to its default tree')
    parser.add_argument('--no-seed', action='store_true',
                        help='Do not copy bundled posts into /blog')
    parser.add_argument('--no-color', action='store_true', help='Disable colors')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    config = TerminalConfig(
        state_dir=None if args.memory else args.state_dir,
        reset_state=args.reset,
        seed_blog=not args.no_seed,
        enable_colors=not args.no_color,
    )
    session = TerminalSession(config=config)

    if args.command:
        output = session.run_command(args.command)
        if output:
            print(output)
    else:
        session.run_interactive()


if __name__ == '__main__':
    main()
