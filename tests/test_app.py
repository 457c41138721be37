"""Tests for the codepulse command line."""

import pytest

from codepulse.app import run
from fake_daemon import FakeDaemon


@pytest.fixture(autouse=True)
def isolated_settings(qapp, tmp_path):
    from PySide6.QtCore import QSettings
    QSettings.setDefaultFormat(QSettings.IniFormat)
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path / "config"))


def test_status_missing_socket(tmp_path, capsys):
    path = str(tmp_path / "none.sock")
    assert run(["--socket", path, "status"]) == 0
    out = capsys.readouterr().out
    assert path in out
    assert "missing" in out


def test_ping_without_daemon(tmp_path, capsys):
    assert run(["--socket", str(tmp_path / "none.sock"), "ping"]) == 1
    assert "error:" in capsys.readouterr().err


def test_sync_with_daemon(tmp_path, capsys):
    path = str(tmp_path / "d.sock")
    daemon = FakeDaemon(path, reply=b'{"ok": true, "message": "synced 3 sessions"}\n')
    try:
        assert run(["--socket", path, "sync"]) == 0
    finally:
        daemon.close()
    assert "synced 3 sessions" in capsys.readouterr().out
    assert daemon.messages == [{"type": "sync"}]


def test_requires_command():
    with pytest.raises(SystemExit):
        run([])
