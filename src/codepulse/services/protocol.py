"""Newline-delimited JSON codec for the daemon socket."""

import logging

import orjson

from codepulse.types import DaemonResponse

logger = logging.getLogger(__name__)

MSG_PING = "ping"
MSG_SYNC = "sync"
MSG_ACTIVITY = "activity"


def encode_message(message: dict) -> bytes:
    return orjson.dumps(message) + b"\n"


def ping_message() -> dict:
    return {"type": MSG_PING}


def sync_message() -> dict:
    return {"type": MSG_SYNC}


def activity_message(payload: dict) -> dict:
    return {"type": MSG_ACTIVITY, "data": payload}


def decode_response(line: bytes) -> DaemonResponse:
    """Parse one response line; anything unexpected is a generic failure."""
    try:
        raw = orjson.loads(line)
    except orjson.JSONDecodeError:
        logger.debug("Malformed daemon response: %r", line[:200])
        return DaemonResponse.failure("malformed response from daemon")

    if not isinstance(raw, dict):
        return DaemonResponse.failure("malformed response from daemon")

    if raw.get("ok") is True:
        return DaemonResponse(ok=True, message=str(raw.get("message") or ""))
    return DaemonResponse.failure(str(raw.get("error") or "request failed"))
