"""Session, per-file metrics and focus clock types."""

from dataclasses import dataclass, field

from codepulse.types.project import ProjectInfo


@dataclass
class Session:
    started_at: float
    project: str | None = None
    git_remote: str | None = None
    git_branch: str | None = None
    private: bool = False
    vcs_root: str | None = None

    @classmethod
    def from_project(cls, info: ProjectInfo, started_at: float) -> "Session":
        return cls(
            started_at=started_at,
            project=info.project,
            git_remote=info.git_remote,
            git_branch=info.git_branch,
            private=info.private,
            vcs_root=info.vcs_root,
        )

    def age(self, now: float) -> float:
        return now - self.started_at


@dataclass
class FileMetrics:
    """Accumulated activity for one file within the current session."""
    filepath: str
    filetype: str | None = None
    action_count: int = 0
    words_added: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    active_seconds: float = 0.0
    # Last word/line counts seen by a recount
    word_count: int | None = None
    line_count: int | None = None

    def has_activity(self) -> bool:
        return self.active_seconds >= 1 or self.action_count > 0

    def reset(self):
        """Zero the counters, keeping the recount snapshot."""
        self.action_count = 0
        self.words_added = 0
        self.lines_added = 0
        self.lines_removed = 0
        self.active_seconds = 0.0


@dataclass
class FocusClock:
    filepath: str | None = None
    entered_at: float = 0.0

    @property
    def running(self) -> bool:
        return self.filepath is not None


@dataclass(frozen=True)
class BufferSnapshot:
    """What the editor reports about its current buffer."""
    filepath: str
    filetype: str | None = None
    word_count: int = 0
    line_count: int = 0


@dataclass
class SessionSummary:
    project: str | None = None
    age_seconds: float = 0.0
    tracked_files: list[str] = field(default_factory=list)
    focused_file: str | None = None
