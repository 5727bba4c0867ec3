from __future__ import annotations
import subprocess

import pytest

from lssort.state import ViewState


class FakeSettings(dict):
    '''just enough of sublime.Settings'''
    def set(self, key, value):
        self[key] = value

    def has(self, key):
        return key in self

    def erase(self, key):
        self.pop(key, None)


class FakeView:
    def __init__(self, settings=None):
        self._settings = FakeSettings() if settings is None else settings
        self.commands = []

    def settings(self):
        return self._settings

    def run_command(self, command, args=None):
        self.commands.append((command, args))


class FakeHost:
    '''a buffer of lines, standing in for a listing view'''
    def __init__(self, path='/home/user/project/', entries=None, cursor=0):
        self.path = path
        self.entries = ['file.txt', 'notes.md'] if entries is None else entries
        self.lines: list[str] = []
        self.offset = cursor
        self.redraws: list[str] = []

    def cursor(self):
        return self.offset

    def set_cursor(self, offset):
        self.offset = offset

    def size(self):
        return len('\n'.join(self.lines))

    def redraw(self, switches):
        self.redraws.append(switches)
        self.lines = ['%s:' % self.path, 'total 8'] + list(self.entries)

    def insert_line(self, row, text):
        self.lines.insert(row, text)


def completed(stdout='', returncode=0, stderr=''):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def settings():
    return FakeSettings()


@pytest.fixture
def state(settings):
    return ViewState(settings)


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def host():
    return FakeHost()
