"""Type definitions for codepulse."""

from codepulse.types.project import ProjectInfo
from codepulse.types.session import (
    BufferSnapshot,
    FileMetrics,
    FocusClock,
    Session,
    SessionSummary,
)
from codepulse.types.payload import (
    EDITOR_NAME,
    PRIVATE_SENTINEL,
    ActivityPayload,
    DaemonResponse,
)

__all__ = [
    "ProjectInfo",
    "BufferSnapshot",
    "FileMetrics",
    "FocusClock",
    "Session",
    "SessionSummary",
    "EDITOR_NAME",
    "PRIVATE_SENTINEL",
    "ActivityPayload",
    "DaemonResponse",
]
