"""Debounced word/line recounts for the focused buffer."""

import logging

from PySide6.QtCore import QObject, Signal

from codepulse.services.metrics_aggregator import MetricsAggregator
from codepulse.services.scheduler import ScheduledTask

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 1000


class Debouncer(QObject):
    """Coalesces a burst of text changes into a single recount.

    Only the word/line count is deferred; the action itself is recorded by
    the caller when the change happens.
    """

    recounted = Signal(str)  # file_path
    abandoned = Signal(str)  # file_path

    def __init__(self, aggregator: MetricsAggregator,
                 interval_ms: int = DEFAULT_DEBOUNCE_MS, parent=None):
        super().__init__(parent)
        self._aggregator = aggregator
        self._interval_ms = interval_ms
        self._target: str | None = None
        self._probe = None
        self._task = ScheduledTask(self._on_fire, self)

    @property
    def pending(self) -> bool:
        return self._task.pending

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def schedule_recount(self, filepath: str, probe):
        """Arm a recount of filepath, replacing any pending one.

        probe is called at fire time and must return the current
        BufferSnapshot (or None).
        """
        self._target = filepath
        self._probe = probe
        self._task.start(self._interval_ms)

    def cancel(self):
        self._task.cancel()
        self._target = None
        self._probe = None

    def _on_fire(self):
        filepath, probe = self._target, self._probe
        self._target = None
        self._probe = None
        if filepath is None or probe is None:
            return

        snapshot = probe()
        # Focus may have moved during the quiet period
        if snapshot is None or snapshot.filepath != filepath:
            logger.debug("Dropping stale recount for %s", filepath)
            self.abandoned.emit(filepath)
            return

        self._aggregator.apply_recount(filepath, snapshot.word_count, snapshot.line_count)
        self.recounted.emit(filepath)
