"""Command line entry point: talk to the daemon outside an editor."""

import argparse
import logging
import os
import sys

from PySide6.QtCore import QCoreApplication

from codepulse.services.config_manager import ConfigManager
from codepulse.services.transport import TransportClient
from codepulse.types import DaemonResponse

logger = logging.getLogger(__name__)


def configure_logging(debug: bool):
    """Diagnostics are only printed when debug logging is enabled."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="codepulse", description=__doc__)
    parser.add_argument("--socket", help="Daemon socket path (overrides settings)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("ping", help="Check that the daemon answers")
    sub.add_parser("sync", help="Ask the daemon to sync upstream now")
    sub.add_parser("status", help="Show the configured socket path")
    return parser


def run(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("codepulse")
    app.setOrganizationName("codepulse")

    settings = ConfigManager().tracker_settings()
    configure_logging(args.debug or settings.debug_logging)
    socket_path = os.path.expanduser(args.socket) if args.socket else settings.socket_path

    if args.command == "status":
        state = "present" if os.path.exists(socket_path) else "missing"
        print(f"socket: {socket_path} ({state})")
        return 0

    transport = TransportClient(
        socket_path,
        daemon_executable=settings.daemon_executable,
        request_timeout_ms=settings.request_timeout_ms,
    )
    result: list[DaemonResponse] = []

    def on_response(response: DaemonResponse):
        result.append(response)
        app.quit()

    if args.command == "sync":
        transport.sync(on_response)
    else:
        transport.ping(on_response)

    if not result:
        app.exec()

    response = result[0] if result else DaemonResponse.failure("no response")
    if response.ok:
        print(response.message or "ok")
        return 0
    print(f"error: {response.error}", file=sys.stderr)
    return 1
