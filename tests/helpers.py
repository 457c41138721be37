"""Shared test helpers."""

import time

from PySide6.QtCore import QCoreApplication


def process_events_for(ms: int):
    """Run the Qt event loop for roughly ms milliseconds."""
    deadline = time.monotonic() + ms / 1000
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        time.sleep(0.005)
    QCoreApplication.processEvents()


def wait_until(predicate, timeout_ms: int = 2000) -> bool:
    """Process events until predicate() is true or the timeout elapses."""
    deadline = time.monotonic() + timeout_ms / 1000
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.005)
    QCoreApplication.processEvents()
    return predicate()
