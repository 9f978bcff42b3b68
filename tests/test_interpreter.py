#!/usr/bin/env python3
"""
Tests for the command interpreter.

These tests drive the interpreter with command lines, the way the
terminal does, and check both the result and the resulting state of the
filesystem and session.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from blogshell.filesystem import FileSystemStore
from blogshell.interpreter import (
    CommandInterpreter, CommandResult, HELP_TEXT, title_from_filename,
)
from blogshell.session import SessionState
from blogshell.storage import MemoryStorage


@pytest.fixture
def fs():
    return FileSystemStore(MemoryStorage())


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def sh(fs, session):
    """Interpreter over a fresh store and session."""
    return CommandInterpreter(fs, session)


@pytest.fixture
def populated_sh(sh):
    """Interpreter with a few files and directories already created."""
    sh.fs.create_directory('/docs')
    sh.fs.create_directory('/docs/sub')
    sh.fs.create_file('/docs/a.txt', 'alpha')
    sh.fs.create_file('/docs/notes.txt', 'Foo bar\nnothing here\nfood\nFOO')
    sh.fs.create_file('/blog/my-first-post.md', '# My first post')
    return sh


def run(sh, line):
    return sh.handle_command(line)


class TestBasics:
    """Test blank input, unknown verbs and the static commands."""

    def test_blank_input(self, sh):
        assert run(sh, '') == CommandResult('', False)
        assert run(sh, '    ') == CommandResult('', False)

    def test_unknown_command(self, sh):
        result = run(sh, 'foobar')
        assert result.is_error
        assert result.output == "foobar: command not found. Type 'help' for available commands."

    def test_unknown_command_is_reported_lower_cased(self, sh):
        assert run(sh, 'FooBar x').output.startswith('foobar: command not found')

    def test_verbs_are_case_insensitive(self, sh):
        result = run(sh, 'PWD')
        assert not result.is_error
        assert result.output == '/'

    def test_help(self, sh):
        result = run(sh, 'help')
        assert result.output == HELP_TEXT
        assert not result.is_error
        for verb in sh.commands:
            assert verb in result.output

    def test_pwd(self, sh):
        sh.fs.set_current_path('/blog')
        assert run(sh, 'pwd').output == '/blog'

    def test_result_str(self):
        assert str(CommandResult('text')) == 'text'

    def test_unexpected_failure_becomes_error_result(self, sh, monkeypatch):
        def explode(path):
            raise RuntimeError('boom')
        monkeypatch.setattr(sh.fs, 'read_file', explode)

        result = run(sh, 'cat anything')
        assert result.is_error
        assert result.output == 'cat: boom'


class TestCd:
    """Test changing directories."""

    def test_no_args_goes_to_root(self, sh):
        sh.fs.set_current_path('/blog')
        result = run(sh, 'cd')
        assert result == CommandResult('', False)
        assert sh.fs.current_path == '/'

    def test_absolute(self, populated_sh):
        run(populated_sh, 'cd /docs/sub')
        assert populated_sh.fs.current_path == '/docs/sub'

    def test_relative(self, populated_sh):
        run(populated_sh, 'cd docs')
        run(populated_sh, 'cd sub')
        assert populated_sh.fs.current_path == '/docs/sub'

    def test_dot_dot_from_blog_goes_to_root(self, sh):
        run(sh, 'cd /blog')
        run(sh, 'cd ..')
        assert sh.fs.current_path == '/'

    def test_dot_dot_prefix(self, sh):
        sh.fs.create_directory('/blog/x')
        sh.fs.create_directory('/blog/y')
        run(sh, 'cd /blog/x')
        assert not run(sh, 'cd ../y').is_error
        assert sh.fs.current_path == '/blog/y'

    def test_dot_stays(self, sh):
        run(sh, 'cd blog')
        run(sh, 'cd .')
        assert sh.fs.current_path == '/blog'

    def test_missing(self, sh):
        result = run(sh, 'cd nowhere')
        assert result.is_error
        assert result.output == 'cd: nowhere: No such file or directory'
        assert sh.fs.current_path == '/'

    def test_file(self, populated_sh):
        result = run(populated_sh, 'cd /docs/a.txt')
        assert result.is_error
        assert result.output == 'cd: /docs/a.txt: Not a directory'
        assert populated_sh.fs.current_path == '/'


class TestLs:
    """Test directory listings."""

    def test_lists_with_markers_directories_first(self, populated_sh):
        result = run(populated_sh, 'ls /docs')
        assert not result.is_error
        assert result.output.split('\n') == [
            '\U0001F4C1 sub', '\U0001F4C4 a.txt', '\U0001F4C4 notes.txt',
        ]

    def test_defaults_to_current_path(self, populated_sh):
        run(populated_sh, 'cd docs')
        assert run(populated_sh, 'ls').output == run(populated_sh, 'ls /docs').output

    def test_empty_directory(self, sh):
        assert run(sh, 'ls /blog') == CommandResult('', False)

    def test_missing(self, sh):
        result = run(sh, 'ls ghost')
        assert result.is_error
        assert result.output == "ls: cannot access 'ghost': No such file or directory"

    def test_file_operand_is_an_error(self, populated_sh):
        result = run(populated_sh, 'ls /docs/a.txt')
        assert result.is_error

    def test_missing_current_path_reports_dot(self, populated_sh):
        run(populated_sh, 'cd /docs/sub')
        populated_sh.fs.delete_node('/docs')
        result = run(populated_sh, 'ls')
        assert result.output == "ls: cannot access '.': No such file or directory"


class TestTouchMkdirRm:
    """Test creating and removing entries."""

    def test_touch_creates_empty_file(self, sh):
        assert run(sh, 'touch notes.txt') == CommandResult('', False)
        assert sh.fs.read_file('/notes.txt') == ''

    def test_touch_relative_to_current_path(self, sh):
        run(sh, 'cd blog')
        run(sh, 'touch draft.md')
        assert sh.fs.read_file('/blog/draft.md') == ''

    def test_touch_missing_operand(self, sh):
        result = run(sh, 'touch')
        assert result.is_error
        assert result.output == 'touch: missing file operand'

    def test_touch_existing(self, populated_sh):
        result = run(populated_sh, 'touch /docs/a.txt')
        assert result.is_error
        assert result.output == "touch: cannot create file '/docs/a.txt'"
        assert populated_sh.fs.read_file('/docs/a.txt') == 'alpha'

    def test_touch_bad_parent(self, sh):
        assert run(sh, 'touch /nope/file').is_error

    def test_mkdir(self, sh):
        assert not run(sh, 'mkdir projects').is_error
        assert sh.fs.get_node_at_path('/projects').is_dir()

    def test_mkdir_dot_dot_prefix(self, sh):
        sh.fs.create_directory('/blog/x')
        run(sh, 'cd /blog/x')
        run(sh, 'mkdir ../drafts')
        assert sh.fs.get_node_at_path('/blog/drafts').is_dir()

    def test_mkdir_missing_operand(self, sh):
        result = run(sh, 'mkdir')
        assert result.is_error
        assert result.output == 'mkdir: missing directory operand'

    def test_mkdir_existing(self, sh):
        result = run(sh, 'mkdir blog')
        assert result.is_error
        assert result.output == "mkdir: cannot create directory 'blog'"

    def test_rm_file(self, populated_sh):
        assert not run(populated_sh, 'rm /docs/a.txt').is_error
        assert populated_sh.fs.get_node_at_path('/docs/a.txt') is None

    def test_rm_directory(self, populated_sh):
        run(populated_sh, 'cd docs')
        assert not run(populated_sh, 'rm sub').is_error
        assert populated_sh.fs.get_node_at_path('/docs/sub') is None

    def test_rm_missing_operand(self, sh):
        assert run(sh, 'rm').output == 'rm: missing file operand'

    def test_rm_blog_is_refused(self, sh):
        result = run(sh, 'rm blog')
        assert result.is_error
        assert result.output == "rm: cannot remove 'blog'"
        assert sh.fs.get_node_at_path('/blog') is not None

    def test_rm_blog_via_dot_dot(self, sh):
        run(sh, 'cd /blog')
        assert run(sh, 'rm ../blog').is_error
        assert sh.fs.get_node_at_path('/blog') is not None

    def test_rm_missing(self, sh):
        result = run(sh, 'rm ghost.txt')
        assert result.is_error
        assert result.output == "rm: cannot remove 'ghost.txt'"


class TestEcho:
    """Test echo and its redirect."""

    def test_echo_text(self, sh):
        assert run(sh, 'echo hello   world') == CommandResult('hello world', False)

    def test_echo_nothing(self, sh):
        assert run(sh, 'echo') == CommandResult('', False)

    def test_redirect_then_cat(self, sh):
        assert run(sh, 'echo hello > note.txt') == CommandResult('', False)
        assert run(sh, 'cat note.txt').output == 'hello'

    def test_redirect_overwrites_existing_file(self, populated_sh):
        run(populated_sh, 'echo replaced > /docs/a.txt')
        assert populated_sh.fs.read_file('/docs/a.txt') == 'replaced'

    def test_redirect_without_spaces(self, sh):
        run(sh, 'echo hi>tight.txt')
        assert sh.fs.read_file('/tight.txt') == 'hi'

    def test_redirect_keeps_multiple_words(self, sh):
        run(sh, 'echo one two three > words.txt')
        assert sh.fs.read_file('/words.txt') == 'one two three'

    def test_redirect_target_may_contain_spaces(self, sh):
        run(sh, 'echo hi > my note.txt')
        assert sh.fs.read_file('/my note.txt') == 'hi'

    def test_redirect_relative_to_current_path(self, sh):
        run(sh, 'cd blog')
        run(sh, 'echo draft > draft.md')
        assert sh.fs.read_file('/blog/draft.md') == 'draft'

    def test_redirect_to_directory_fails(self, sh):
        result = run(sh, 'echo hi > blog')
        assert result.is_error
        assert result.output == "echo: cannot write to 'blog'"
        assert sh.fs.get_node_at_path('/blog').is_dir()

    def test_redirect_to_missing_parent_fails(self, sh):
        result = run(sh, 'echo hi > nowhere/file.txt')
        assert result.is_error
        assert result.output == "echo: cannot create file 'nowhere/file.txt'"


class TestCat:
    """Test reading files."""

    def test_cat(self, populated_sh):
        assert run(populated_sh, 'cat /docs/a.txt') == CommandResult('alpha', False)

    def test_cat_dot_dot_prefix(self, populated_sh):
        run(populated_sh, 'cd /docs/sub')
        assert run(populated_sh, 'cat ../a.txt').output == 'alpha'

    def test_cat_missing_operand(self, sh):
        assert run(sh, 'cat').output == 'cat: missing file operand'

    def test_cat_missing(self, sh):
        result = run(sh, 'cat ghost.txt')
        assert result.is_error
        assert result.output == 'cat: ghost.txt: No such file or directory'

    def test_cat_directory(self, sh):
        assert run(sh, 'cat blog').output == 'cat: blog: No such file or directory'


class TestGrep:
    """Test searching files."""

    def test_case_insensitive_matches(self, populated_sh):
        result = run(populated_sh, 'grep foo /docs/notes.txt')
        assert not result.is_error
        assert result.output == 'Foo bar\nfood\nFOO'

    def test_regex(self, populated_sh):
        assert run(populated_sh, 'grep ^foo$ /docs/notes.txt').output == 'FOO'

    def test_no_match_is_empty(self, populated_sh):
        assert run(populated_sh, 'grep zebra /docs/notes.txt') == CommandResult('', False)

    def test_missing_operands(self, sh):
        for line in ('grep', 'grep foo'):
            result = run(sh, line)
            assert result.is_error
            assert result.output == 'grep: missing pattern or file operand'

    def test_missing_file(self, sh):
        result = run(sh, 'grep foo missing.txt')
        assert result.is_error
        assert result.output == 'grep: missing.txt: No such file or directory'

    def test_invalid_pattern(self, populated_sh):
        result = run(populated_sh, 'grep ( /docs/notes.txt')
        assert result.is_error
        assert result.output == "grep: invalid pattern '('"


class TestOpen:
    """Test opening markdown files in the blog panel."""

    def test_open_markdown(self, populated_sh):
        result = run(populated_sh, 'open /blog/my-first-post.md')
        assert result == CommandResult('Opening my-first-post.md...', False)
        session = populated_sh.session
        assert session.blog_panel_open
        assert session.current_blog_content == '# My first post'
        assert session.current_blog_title == 'my first post'

    def test_open_relative(self, populated_sh):
        run(populated_sh, 'cd blog')
        assert not run(populated_sh, 'open my-first-post.md').is_error

    def test_open_missing_operand(self, sh):
        assert run(sh, 'open').output == 'open: missing file operand'

    def test_open_non_markdown(self, populated_sh):
        result = run(populated_sh, 'open readme.txt')
        assert result.is_error
        assert result.output == 'open: readme.txt: Not a markdown file'
        assert not populated_sh.session.blog_panel_open

    def test_open_existing_non_markdown(self, populated_sh):
        result = run(populated_sh, 'open /docs/a.txt')
        assert result.output == 'open: /docs/a.txt: Not a markdown file'

    def test_open_missing_markdown(self, sh):
        result = run(sh, 'open ghost.md')
        assert result.is_error
        assert result.output == 'open: ghost.md: No such file or directory'

    def test_title_from_filename(self):
        assert title_from_filename('clean-architecture.md') == 'clean architecture'
        assert title_from_filename('plain') == 'plain'


class TestSessionSignals:
    """Test commands that only signal the session."""

    def test_whoami_opens_profile(self, sh):
        assert run(sh, 'whoami') == CommandResult('', False)
        assert sh.session.show_whoami_modal

    def test_clear_empties_history(self, sh):
        sh.session.add_history('ls', '')
        sh.session.add_history('pwd', '/')
        assert run(sh, 'clear') == CommandResult('', False)
        assert sh.session.history == []


class TestIsolation:
    """Test that interpreters do not share state."""

    def test_separate_instances(self):
        first = CommandInterpreter(FileSystemStore(), SessionState())
        second = CommandInterpreter(FileSystemStore(), SessionState())

        first.handle_command('touch only-here.txt')
        first.handle_command('cd blog')

        assert second.handle_command('cat /only-here.txt').is_error
        assert second.handle_command('pwd').output == '/'
