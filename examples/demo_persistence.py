#!/usr/bin/env python3
"""Demo of a blogshell terminal whose state outlives the session."""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import tempfile

from blogshell.terminal import TerminalSession, TerminalConfig


def run(session, commands):
    for cmd in commands:
        print(f"{session.get_prompt()}{cmd}")
        output = session.run_command(cmd)
        if output:
            print(output)


def main():
    state_dir = tempfile.mkdtemp(prefix='blogshell-demo-')
    config = TerminalConfig(state_dir=state_dir, enable_colors=False)

    print("=" * 60)
    print("blogshell - Persistence Demo")
    print("=" * 60)

    # Part 1: Work in a first session
    print("\n1. First session...")
    first = TerminalSession(config)
    run(first, [
        "ls /blog",
        "mkdir notes",
        "cd notes",
        "echo remember the milk > todo.txt",
        "cd ..",
        "ls",
    ])

    # Part 2: A new session picks up where the first left off
    print("\n2. Second session, same state directory...")
    second = TerminalSession(config)
    run(second, [
        "pwd",
        "cat notes/todo.txt",
        "grep MILK notes/todo.txt",
        "rm blog",
        "open /blog/welcome.md",
    ])

    print("\n" + "=" * 60)
    print("Demo complete!")
    print(f"State saved in: {state_dir}")
    print("=" * 60)


if __name__ == "__main__":
    main()
