"""Tracker configuration wrapping QSettings."""

import logging
import os
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal, Slot, QSettings

logger = logging.getLogger(__name__)

# Default values
DEFAULTS = {
    "daemon/socketPath": "~/.local/share/codepulse/daemon.sock",
    "daemon/executable": "codepulse-daemon",
    "daemon/requestTimeout": 5000,
    "tracking/idleTimeout": 120,
    "tracking/debounceInterval": 1000,
    "tracking/flushInterval": 60,
    "tracking/pingInterval": 30,
    "tracking/ignoredModes": "help,qf,netrw,gitcommit,fugitive,terminal",
    "advanced/debugLogging": False,
}


@dataclass(frozen=True)
class TrackerSettings:
    """Snapshot of the settings the tracker core consumes."""
    socket_path: str = os.path.expanduser(DEFAULTS["daemon/socketPath"])
    daemon_executable: str = DEFAULTS["daemon/executable"]
    request_timeout_ms: int = DEFAULTS["daemon/requestTimeout"]
    idle_timeout_s: int = DEFAULTS["tracking/idleTimeout"]
    debounce_ms: int = DEFAULTS["tracking/debounceInterval"]
    flush_interval_s: int = DEFAULTS["tracking/flushInterval"]
    ping_interval_s: int = DEFAULTS["tracking/pingInterval"]
    ignored_modes: frozenset = frozenset(DEFAULTS["tracking/ignoredModes"].split(","))
    debug_logging: bool = False


class ConfigManager(QObject):
    """Centralized tracker settings."""

    settings_changed = Signal(str)  # key

    def __init__(self, parent=None):
        super().__init__(parent)
        self._settings = QSettings()

    @Slot(str, result=str)
    def get_string(self, key: str) -> str:
        return str(self._settings.value(key, DEFAULTS.get(key, "")))

    @Slot(str, result=int)
    def get_int(self, key: str) -> int:
        val = self._settings.value(key, DEFAULTS.get(key, 0))
        try:
            return int(val)
        except (ValueError, TypeError):
            return DEFAULTS.get(key, 0)

    @Slot(str, result=bool)
    def get_bool(self, key: str) -> bool:
        val = self._settings.value(key, DEFAULTS.get(key, False))
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    @Slot(str, result=list)
    def get_list(self, key: str) -> list[str]:
        """Read a comma-separated (or natively stored) list."""
        val = self._settings.value(key, DEFAULTS.get(key, ""))
        if isinstance(val, (list, tuple)):
            items = [str(v) for v in val]
        else:
            items = str(val).split(",")
        return [item.strip() for item in items if item and item.strip()]

    @Slot(str, str)
    def set_string(self, key: str, value: str):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, int)
    def set_int(self, key: str, value: int):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, bool)
    def set_bool(self, key: str, value: bool):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, list)
    def set_list(self, key: str, values: list):
        self._settings.setValue(key, ",".join(str(v).strip() for v in values))
        self.settings_changed.emit(key)

    def tracker_settings(self) -> TrackerSettings:
        return TrackerSettings(
            socket_path=os.path.expanduser(self.get_string("daemon/socketPath")),
            daemon_executable=self.get_string("daemon/executable"),
            request_timeout_ms=self.get_int("daemon/requestTimeout"),
            idle_timeout_s=self.get_int("tracking/idleTimeout"),
            debounce_ms=self.get_int("tracking/debounceInterval"),
            flush_interval_s=self.get_int("tracking/flushInterval"),
            ping_interval_s=self.get_int("tracking/pingInterval"),
            ignored_modes=frozenset(self.get_list("tracking/ignoredModes")),
            debug_logging=self.get_bool("advanced/debugLogging"),
        )
