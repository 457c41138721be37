"""Tracker: the context object the editor integration talks to."""

import logging
import time

from PySide6.QtCore import QObject, Signal

from codepulse.services.config_manager import TrackerSettings
from codepulse.services.debouncer import Debouncer
from codepulse.services.metrics_aggregator import MetricsAggregator
from codepulse.services.project_resolver import ProjectResolver
from codepulse.services.scheduler import Scheduler
from codepulse.services.session_manager import SessionManager
from codepulse.services.transport import TransportClient
from codepulse.types import BufferSnapshot, SessionSummary

logger = logging.getLogger(__name__)


class Tracker(QObject):
    """Owns all tracking state for one editor process.

    Lifecycle: construct, init(), feed on_buffer_activity()/on_text_change()
    from editor notifications, shutdown(). probe is a callable returning the
    current BufferSnapshot, or None when no file buffer is focused.
    """

    running_changed = Signal(bool)

    def __init__(self, probe, settings: TrackerSettings | None = None,
                 resolver: ProjectResolver | None = None,
                 transport: TransportClient | None = None,
                 clock=time.time, parent=None):
        super().__init__(parent)
        self._probe = probe
        self._settings = settings or TrackerSettings()
        self._clock = clock
        self._running = False

        self._resolver = resolver or ProjectResolver()
        self._transport = transport or TransportClient(
            self._settings.socket_path,
            daemon_executable=self._settings.daemon_executable,
            request_timeout_ms=self._settings.request_timeout_ms,
            parent=self,
        )
        self._aggregator = MetricsAggregator()
        self._scheduler = Scheduler(
            ping_interval_ms=self._settings.ping_interval_s * 1000,
            flush_interval_ms=self._settings.flush_interval_s * 1000,
            idle_timeout_ms=self._settings.idle_timeout_s * 1000,
            parent=self,
        )
        self._debouncer = Debouncer(self._aggregator, self._settings.debounce_ms, self)
        self._sessions = SessionManager(self._aggregator, self._scheduler, clock, self)

        self._sessions.payload_ready.connect(self._transport.send_activity)
        self._scheduler.ping_due.connect(self._transport.send_ping)
        self._scheduler.flush_due.connect(self._on_flush_due)
        self._scheduler.idle_expired.connect(self._on_idle)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def sessions(self) -> SessionManager:
        return self._sessions

    @property
    def aggregator(self) -> MetricsAggregator:
        return self._aggregator

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def transport(self) -> TransportClient:
        return self._transport

    def init(self):
        """Start the daemon if needed and begin keepalive pings."""
        if self._running:
            return
        self._running = True
        self._transport.ensure_daemon()
        self._scheduler.start_keepalive()
        self.running_changed.emit(True)

    def shutdown(self):
        """End the current session, stop every timer and drop the connection."""
        if not self._running:
            return
        self._running = False
        self._debouncer.cancel()
        try:
            self._sessions.end_session()
        except Exception:
            logger.exception("Failed to end session during shutdown")
        self._scheduler.stop_all()
        self._transport.close()
        self.running_changed.emit(False)

    # ------------------------------------------------------------------
    # Editor entry points
    # ------------------------------------------------------------------

    def on_buffer_activity(self):
        """Buffer opened, focused or saved."""
        self._handle_event(text_changed=False)

    def on_text_change(self):
        """Buffer contents changed."""
        self._handle_event(text_changed=True)

    def _handle_event(self, text_changed: bool):
        if not self._running:
            return
        try:
            snapshot = self._probe()
            if not self._qualifies(snapshot):
                return
            info = self._resolver.resolve(snapshot.filepath)
            self._sessions.handle_activity(snapshot, info)
            if text_changed:
                self._aggregator.record_action(snapshot.filepath, snapshot.filetype, snapshot)
                self._debouncer.schedule_recount(snapshot.filepath, self._probe)
            self._scheduler.touch_idle()
        except Exception:
            logger.exception("Failed to handle editor event")

    def _qualifies(self, snapshot: BufferSnapshot | None) -> bool:
        if snapshot is None or not snapshot.filepath:
            return False
        if snapshot.filetype and snapshot.filetype in self._settings.ignored_modes:
            return False
        return True

    # ------------------------------------------------------------------
    # Timer callbacks
    # ------------------------------------------------------------------

    def _on_flush_due(self):
        try:
            self._sessions.flush()
        except Exception:
            logger.exception("Periodic flush failed")

    def _on_idle(self):
        logger.debug("Idle timeout reached")
        self._debouncer.cancel()
        try:
            self._sessions.end_session()
        except Exception:
            logger.exception("Failed to end idle session")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def ping(self, callback):
        return self._transport.ping(callback)

    def sync(self, callback):
        return self._transport.sync(callback)

    def status(self) -> SessionSummary:
        session = self._sessions.session
        if session is None:
            return SessionSummary()
        return SessionSummary(
            project=session.project,
            age_seconds=session.age(self._clock()),
            tracked_files=[m.filepath for m in self._aggregator.entries()],
            focused_file=self._aggregator.focused_file,
        )
