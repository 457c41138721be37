"""Timers driving keepalive pings, periodic flushes and the idle timeout."""

import logging

from PySide6.QtCore import QObject, Signal, QTimer

logger = logging.getLogger(__name__)


class ScheduledTask(QObject):
    """A cancellable one-shot timer.

    Every start() bumps a generation token; a timeout only runs the callback
    if its token is still the armed one, so a cancelled or re-armed task can
    never fire for a previous schedule.
    """

    def __init__(self, callback, parent=None):
        super().__init__(parent)
        self._callback = callback
        self._token = 0
        self._armed_token: int | None = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def pending(self) -> bool:
        return self._armed_token is not None

    @property
    def token(self) -> int:
        return self._token

    def start(self, interval_ms: int) -> int:
        """(Re)arm the task, replacing any earlier schedule."""
        self._timer.stop()
        self._token += 1
        self._armed_token = self._token
        self._timer.start(max(0, int(interval_ms)))
        return self._token

    def cancel(self):
        self._armed_token = None
        self._timer.stop()

    def _on_timeout(self):
        if self._armed_token is None or self._armed_token != self._token:
            return
        self._armed_token = None
        self._callback()


class Scheduler(QObject):
    """Owns the keepalive, flush and idle timers; emits when each is due."""

    ping_due = Signal()
    flush_due = Signal()
    idle_expired = Signal()

    def __init__(
        self,
        ping_interval_ms: int = 30_000,
        flush_interval_ms: int = 60_000,
        idle_timeout_ms: int = 120_000,
        parent=None,
    ):
        super().__init__(parent)
        self._idle_timeout_ms = idle_timeout_ms

        self._ping_timer = QTimer(self)
        self._ping_timer.setInterval(ping_interval_ms)
        self._ping_timer.timeout.connect(self.ping_due)

        self._flush_timer = QTimer(self)
        self._flush_timer.setInterval(flush_interval_ms)
        self._flush_timer.timeout.connect(self.flush_due)

        self._idle_task = ScheduledTask(self.idle_expired.emit, self)

    @property
    def flush_active(self) -> bool:
        return self._flush_timer.isActive()

    @property
    def keepalive_active(self) -> bool:
        return self._ping_timer.isActive()

    @property
    def idle_pending(self) -> bool:
        return self._idle_task.pending

    def start_keepalive(self):
        self._ping_timer.start()

    def stop_keepalive(self):
        self._ping_timer.stop()

    def start_flush(self):
        self._flush_timer.start()

    def stop_flush(self):
        self._flush_timer.stop()

    def touch_idle(self):
        """Restart the idle countdown after activity."""
        self._idle_task.start(self._idle_timeout_ms)

    def cancel_idle(self):
        self._idle_task.cancel()

    def stop_all(self):
        self._ping_timer.stop()
        self._flush_timer.stop()
        self._idle_task.cancel()
        logger.debug("All timers stopped")
