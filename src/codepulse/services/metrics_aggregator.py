"""Per-file coding metrics and the focus clock for one session."""

import logging

from codepulse.types import BufferSnapshot, FileMetrics, FocusClock

logger = logging.getLogger(__name__)


class MetricsAggregator:
    """Owns filepath -> FileMetrics and which file is accruing active time.

    Recount baselines outlive the metrics: clear() drops the entries but
    keeps each file's last word/line snapshot for the next session.
    """

    def __init__(self):
        self._files: dict[str, FileMetrics] = {}
        self._baselines: dict[str, tuple[int, int]] = {}
        self._clock = FocusClock()

    def __len__(self) -> int:
        return len(self._files)

    def get(self, filepath: str) -> FileMetrics | None:
        return self._files.get(filepath)

    def entries(self) -> list[FileMetrics]:
        return list(self._files.values())

    def active_entries(self) -> list[FileMetrics]:
        return [m for m in self._files.values() if m.has_activity()]

    @property
    def focused_file(self) -> str | None:
        return self._clock.filepath

    def ensure(self, filepath: str, filetype: str | None = None,
               snapshot: BufferSnapshot | None = None) -> FileMetrics:
        """Return the entry for filepath, creating a zeroed one if needed.

        A new entry reuses the baseline kept from an earlier session, and
        otherwise takes it from snapshot.
        """
        metrics = self._files.get(filepath)
        if metrics is None:
            metrics = FileMetrics(filepath=filepath, filetype=filetype)
            baseline = self._baselines.get(filepath)
            if baseline is not None:
                metrics.word_count, metrics.line_count = baseline
            elif snapshot is not None:
                metrics.word_count = snapshot.word_count
                metrics.line_count = snapshot.line_count
            self._files[filepath] = metrics
        elif filetype and not metrics.filetype:
            metrics.filetype = filetype
        return metrics

    def record_action(self, filepath: str, filetype: str | None = None,
                      snapshot: BufferSnapshot | None = None) -> FileMetrics:
        metrics = self.ensure(filepath, filetype, snapshot)
        metrics.action_count += 1
        return metrics

    def apply_recount(self, filepath: str, word_count: int, line_count: int):
        """Credit word/line deltas since the last snapshot, then store the new one."""
        metrics = self.ensure(filepath)
        if metrics.word_count is not None:
            word_delta = word_count - metrics.word_count
            if word_delta > 0:
                metrics.words_added += word_delta
        if metrics.line_count is not None:
            line_delta = line_count - metrics.line_count
            if line_delta > 0:
                metrics.lines_added += line_delta
            elif line_delta < 0:
                metrics.lines_removed += -line_delta
        metrics.word_count = word_count
        metrics.line_count = line_count

    # ------------------------------------------------------------------
    # Focus clock
    # ------------------------------------------------------------------

    def clock_in(self, filepath: str, now: float):
        self._clock = FocusClock(filepath=filepath, entered_at=now)

    def clock_out(self, now: float) -> float:
        """Close the accrual window; returns the seconds credited."""
        if not self._clock.running:
            return 0.0
        elapsed = now - self._clock.entered_at
        credited = 0.0
        if elapsed > 0:
            metrics = self._files.get(self._clock.filepath)
            if metrics is not None:
                metrics.active_seconds += elapsed
                credited = elapsed
        self._clock = FocusClock()
        return credited

    def switch_focus(self, filepath: str, now: float):
        if self._clock.filepath == filepath:
            return
        self.clock_out(now)
        self.clock_in(filepath, now)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_counters(self, filepaths):
        for path in filepaths:
            metrics = self._files.get(path)
            if metrics is not None:
                metrics.reset()

    def clear(self):
        for path, metrics in self._files.items():
            if metrics.word_count is not None and metrics.line_count is not None:
                self._baselines[path] = (metrics.word_count, metrics.line_count)
        self._files.clear()
        self._clock = FocusClock()
