"""Session lifecycle: start, end, periodic flush and payload construction."""

import logging
import time

from PySide6.QtCore import QObject, Signal

from codepulse.services.metrics_aggregator import MetricsAggregator
from codepulse.services.scheduler import Scheduler
from codepulse.types import (
    PRIVATE_SENTINEL,
    ActivityPayload,
    BufferSnapshot,
    FileMetrics,
    ProjectInfo,
    Session,
)
from codepulse.utils.paths import display_filename
from codepulse.utils.timestamps import format_utc

logger = logging.getLogger(__name__)

# Sessions shorter than this are dropped without emitting anything
MIN_SESSION_SECONDS = 10.0


def build_payload(session: Session, metrics: FileMetrics, now: float) -> ActivityPayload:
    """Project one file's metrics plus session identity onto the wire format."""
    seconds = metrics.active_seconds
    if seconds < 1:
        seconds = 1.0
    minutes = seconds / 60
    if minutes:
        actions_per_minute = round(metrics.action_count / minutes, 1)
        words_per_minute = round(metrics.words_added / minutes, 1)
    else:
        actions_per_minute = words_per_minute = 0.0

    if session.private:
        project = git_remote = git_branch = PRIVATE_SENTINEL
        filename = None
    else:
        project = session.project
        git_remote = session.git_remote
        git_branch = session.git_branch
        filename = display_filename(metrics.filepath, session.vcs_root)

    return ActivityPayload(
        project=project,
        git_remote=git_remote,
        git_branch=git_branch,
        started_at=format_utc(now - seconds),
        ended_at=format_utc(now),
        filename=filename,
        filetype=metrics.filetype,
        lines_added=metrics.lines_added,
        lines_removed=metrics.lines_removed,
        actions_per_minute=actions_per_minute,
        words_per_minute=words_per_minute,
    )


class SessionManager(QObject):
    """Owns the single current session (or none).

    Inactive -> Active on the first qualifying event; Active -> Inactive on
    a project change, idle timeout or shutdown. A project change is always
    an end followed by a separate start.
    """

    session_started = Signal(str)  # project
    session_ended = Signal(str, bool)  # project, payloads emitted
    payload_ready = Signal(dict)

    def __init__(self, aggregator: MetricsAggregator, scheduler: Scheduler | None = None,
                 clock=time.time, parent=None):
        super().__init__(parent)
        self._aggregator = aggregator
        self._scheduler = scheduler
        self._clock = clock
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def handle_activity(self, snapshot: BufferSnapshot, info: ProjectInfo):
        """Reconcile the session with an event on snapshot.filepath."""
        if self._session is not None and self._session.project != info.project:
            logger.debug("Project changed %s -> %s", self._session.project, info.project)
            self.end_session()

        if self._session is None:
            self.start_session(info)

        now = self._clock()
        self._aggregator.ensure(snapshot.filepath, snapshot.filetype, snapshot)
        self._aggregator.switch_focus(snapshot.filepath, now)

    def start_session(self, info: ProjectInfo):
        if self._session is not None:
            self.end_session()

        self._aggregator.clear()
        self._session = Session.from_project(info, self._clock())
        if self._scheduler is not None:
            self._scheduler.start_flush()
        logger.debug("Session started for %s", info.project)
        self.session_started.emit(info.project)

    def end_session(self) -> list[ActivityPayload]:
        """End the current session, emitting final payloads unless it was too short."""
        session = self._session
        if session is None:
            return []

        now = self._clock()
        if session.age(now) < MIN_SESSION_SECONDS:
            logger.debug("Discarding %.1fs session for %s", session.age(now), session.project)
            self._aggregator.clock_out(now)
            payloads = []
        else:
            payloads, _ = self._collect(session, now)

        if self._scheduler is not None:
            self._scheduler.stop_flush()
        self._aggregator.clear()
        self._session = None

        self._emit(payloads)
        self.session_ended.emit(session.project or "", bool(payloads))
        return payloads

    def flush(self) -> list[ActivityPayload]:
        """Periodic flush: emit payloads and zero counters, keeping the session."""
        session = self._session
        if session is None:
            return []

        now = self._clock()
        if session.age(now) < MIN_SESSION_SECONDS:
            return []

        focused = self._aggregator.focused_file
        payloads, flushed = self._collect(session, now)
        self._aggregator.reset_counters(flushed)
        if focused is not None:
            self._aggregator.clock_in(focused, now)

        self._emit(payloads)
        return payloads

    def _collect(self, session: Session, now: float) -> tuple[list[ActivityPayload], list[str]]:
        self._aggregator.clock_out(now)
        payloads = []
        flushed = []
        for metrics in self._aggregator.active_entries():
            payloads.append(build_payload(session, metrics, now))
            flushed.append(metrics.filepath)
        return payloads, flushed

    def _emit(self, payloads: list[ActivityPayload]):
        for payload in payloads:
            self.payload_ready.emit(payload.to_dict())
