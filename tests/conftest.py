"""Shared test fixtures for codepulse."""

import os
import sys

import pytest

from codepulse.services.git_inspector import GitInspector
from codepulse.types import BufferSnapshot


@pytest.fixture(scope="session")
def qapp():
    """Create a QGuiApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication(sys.argv or ["test"])
    yield app


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class StaticGitInspector(GitInspector):
    def __init__(self, remote=None, branch=None):
        self.remote = remote
        self.branch = branch
        self.calls = 0

    def remote_url(self, root):
        self.calls += 1
        return self.remote

    def current_branch(self, root):
        return self.branch


class FakeBuffer:
    """Mutable editor buffer state served through a probe."""

    def __init__(self, filepath="", filetype="python", word_count=0, line_count=0):
        self.filepath = filepath
        self.filetype = filetype
        self.word_count = word_count
        self.line_count = line_count

    def probe(self) -> BufferSnapshot | None:
        if not self.filepath:
            return None
        return BufferSnapshot(
            filepath=self.filepath,
            filetype=self.filetype,
            word_count=self.word_count,
            line_count=self.line_count,
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def git() -> StaticGitInspector:
    return StaticGitInspector(remote="git@github.com:user/repo.git", branch="main")


@pytest.fixture
def buffer() -> FakeBuffer:
    return FakeBuffer()


@pytest.fixture
def repo(tmp_path):
    """A directory tree with a .git marker at its root."""
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return root
