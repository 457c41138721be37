"""Local socket transport to the companion daemon."""

import logging
import os
import shutil
import subprocess

from PySide6.QtCore import QObject, Signal, QTimer
from PySide6.QtNetwork import QLocalSocket

from codepulse.services.protocol import (
    activity_message,
    decode_response,
    encode_message,
    ping_message,
    sync_message,
)
from codepulse.types import DaemonResponse

logger = logging.getLogger(__name__)

DEFAULT_DAEMON_EXECUTABLE = "codepulse-daemon"
DEFAULT_REQUEST_TIMEOUT_MS = 5000
SPAWN_POLL_INTERVAL_MS = 50
SPAWN_POLL_LIMIT_MS = 500


class _PendingRequest(QObject):
    """One request/response exchange over its own short-lived connection.

    The callback runs exactly once: with the parsed first response line, or
    with a failure on socket error, early close or timeout.
    """

    def __init__(self, socket_path: str, message: dict, callback,
                 timeout_ms: int, parent=None):
        super().__init__(parent)
        self._socket_path = socket_path
        self._data = encode_message(message)
        self._callback = callback
        self._buffer = b""
        self._done = False

        self._socket = QLocalSocket(self)
        self._socket.connected.connect(self._on_connected)
        self._socket.readyRead.connect(self._on_ready_read)
        self._socket.disconnected.connect(self._on_disconnected)
        self._socket.errorOccurred.connect(self._on_error)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)
        self._timeout_ms = timeout_ms

    @property
    def done(self) -> bool:
        return self._done

    def start(self):
        if self._timeout_ms > 0:
            self._timer.start(self._timeout_ms)
        self._socket.connectToServer(self._socket_path)

    def _on_connected(self):
        self._socket.write(self._data)
        self._socket.flush()

    def _on_ready_read(self):
        self._buffer += bytes(self._socket.readAll())
        if b"\n" in self._buffer:
            line = self._buffer.split(b"\n", 1)[0]
            self._finish(decode_response(line))

    def _on_disconnected(self):
        # An unterminated reply is not a response
        if not self._done:
            self._finish(DaemonResponse.failure("daemon closed the connection without a response"))

    def _on_error(self, _error):
        if self._done:
            return
        logger.debug("Request to %s failed: %s", self._socket_path, self._socket.errorString())
        self._finish(DaemonResponse.failure(self._socket.errorString() or "connection error"))

    def _on_timeout(self):
        if not self._done:
            logger.debug("Request to %s timed out", self._socket_path)
            self._finish(DaemonResponse.failure("timed out waiting for daemon"))

    def _finish(self, response: DaemonResponse):
        if self._done:
            return
        self._done = True
        self._timer.stop()
        self._socket.abort()
        try:
            self._callback(response)
        finally:
            self.deleteLater()


class TransportClient(QObject):
    """Fire-and-forget messages over a persistent connection, plus
    request/response calls over ephemeral ones.

    Failed sends are never retried: the persistent socket is dropped and
    reopened lazily on the next send.
    """

    daemon_ready = Signal(bool)
    send_failed = Signal(str)

    def __init__(self, socket_path: str,
                 daemon_executable: str = DEFAULT_DAEMON_EXECUTABLE,
                 request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS,
                 parent=None):
        super().__init__(parent)
        self._socket_path = socket_path
        self._daemon_executable = daemon_executable
        self._request_timeout_ms = request_timeout_ms
        self._socket: QLocalSocket | None = None
        self._pending: list[bytes] = []

        self._spawn_elapsed_ms = 0
        self._spawn_timer = QTimer(self)
        self._spawn_timer.setInterval(SPAWN_POLL_INTERVAL_MS)
        self._spawn_timer.timeout.connect(self._poll_daemon_socket)

    @property
    def socket_path(self) -> str:
        return self._socket_path

    @property
    def connected(self) -> bool:
        return (
            self._socket is not None
            and self._socket.state() == QLocalSocket.LocalSocketState.ConnectedState
        )

    # ------------------------------------------------------------------
    # Fire-and-forget
    # ------------------------------------------------------------------

    def send(self, message: dict) -> bool:
        """Queue message on the persistent connection; never blocks.

        Returns False when the message was dropped immediately.
        """
        data = encode_message(message)
        if self.connected:
            if self._socket.write(data) < 0:
                self._teardown("write failed")
                return False
            return True

        self._pending.append(data)
        if self._socket is None:
            self._open_socket()
        # Connecting may fail synchronously and drop the socket
        return self._socket is not None

    def send_ping(self) -> bool:
        return self.send(ping_message())

    def send_activity(self, payload: dict) -> bool:
        return self.send(activity_message(payload))

    def _open_socket(self):
        sock = QLocalSocket(self)
        sock.connected.connect(self._on_connected)
        sock.disconnected.connect(self._on_disconnected)
        sock.errorOccurred.connect(self._on_error)
        sock.readyRead.connect(self._discard_input)
        self._socket = sock
        sock.connectToServer(self._socket_path)

    def _on_connected(self):
        if self._socket is None:
            return
        pending, self._pending = self._pending, []
        for data in pending:
            if self._socket.write(data) < 0:
                self._teardown("write failed")
                return

    def _on_disconnected(self):
        self._teardown("disconnected")

    def _on_error(self, _error):
        reason = self._socket.errorString() if self._socket is not None else "socket error"
        self._teardown(reason)

    def _discard_input(self):
        if self._socket is not None:
            self._socket.readAll()

    def _teardown(self, reason: str, graceful: bool = False):
        sock, self._socket = self._socket, None
        dropped = len(self._pending)
        self._pending = []
        if sock is None:
            return
        logger.debug("Daemon connection closed (%s), %d message(s) dropped", reason, dropped)
        sock.connected.disconnect(self._on_connected)
        sock.disconnected.disconnect(self._on_disconnected)
        sock.errorOccurred.disconnect(self._on_error)
        sock.readyRead.disconnect(self._discard_input)
        if graceful and sock.state() == QLocalSocket.LocalSocketState.ConnectedState:
            # Hand already-written messages to the kernel before closing
            sock.flush()
            sock.disconnected.connect(sock.deleteLater)
            sock.disconnectFromServer()
            return
        sock.abort()
        sock.deleteLater()
        if not graceful:
            self.send_failed.emit(reason)

    # ------------------------------------------------------------------
    # Request/response
    # ------------------------------------------------------------------

    def request(self, message: dict, callback) -> _PendingRequest:
        """Send message on a dedicated connection; callback gets a DaemonResponse."""
        pending = _PendingRequest(
            self._socket_path, message, callback, self._request_timeout_ms, self,
        )
        pending.start()
        return pending

    def ping(self, callback) -> _PendingRequest:
        return self.request(ping_message(), callback)

    def sync(self, callback) -> _PendingRequest:
        return self.request(sync_message(), callback)

    # ------------------------------------------------------------------
    # Daemon lifecycle
    # ------------------------------------------------------------------

    def ensure_daemon(self) -> bool:
        """Spawn the daemon if its socket is missing.

        Returns False when no spawn was possible. Readiness is reported
        asynchronously through daemon_ready.
        """
        if os.path.exists(self._socket_path):
            self.daemon_ready.emit(True)
            return True

        executable = shutil.which(self._daemon_executable)
        if not executable:
            logger.debug("Daemon executable %s not found on PATH", self._daemon_executable)
            self.daemon_ready.emit(False)
            return False

        try:
            subprocess.Popen(
                [executable],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError:
            logger.debug("Failed to spawn daemon %s", executable, exc_info=True)
            self.daemon_ready.emit(False)
            return False

        logger.debug("Spawned daemon %s, waiting for %s", executable, self._socket_path)
        self._spawn_elapsed_ms = 0
        self._spawn_timer.start()
        return True

    def _poll_daemon_socket(self):
        self._spawn_elapsed_ms += SPAWN_POLL_INTERVAL_MS
        if os.path.exists(self._socket_path):
            self._spawn_timer.stop()
            self.daemon_ready.emit(True)
        elif self._spawn_elapsed_ms >= SPAWN_POLL_LIMIT_MS:
            self._spawn_timer.stop()
            logger.debug("Daemon socket did not appear within %d ms", SPAWN_POLL_LIMIT_MS)
            self.daemon_ready.emit(False)

    def close(self):
        """Drop the persistent connection; in-flight requests are left to finish."""
        self._spawn_timer.stop()
        self._teardown("closed", graceful=True)
