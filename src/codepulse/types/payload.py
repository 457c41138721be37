"""Wire-level payload and daemon response types."""

from dataclasses import asdict, dataclass

EDITOR_NAME = "codepulse"
PRIVATE_SENTINEL = "private"


@dataclass(frozen=True)
class ActivityPayload:
    project: str | None
    git_remote: str | None
    git_branch: str | None
    started_at: str
    ended_at: str
    filename: str | None
    filetype: str | None
    lines_added: int
    lines_removed: int
    actions_per_minute: float
    words_per_minute: float
    editor: str = EDITOR_NAME

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DaemonResponse:
    """Result of a request/response round trip with the daemon."""
    ok: bool
    message: str = ""
    error: str = ""

    @classmethod
    def failure(cls, error: str) -> "DaemonResponse":
        return cls(ok=False, error=error)
