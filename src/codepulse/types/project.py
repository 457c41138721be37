"""Project resolution types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectInfo:
    """Resolved owning project for a directory."""
    project: str
    git_remote: str | None = None
    git_branch: str | None = None
    private: bool = False
    vcs_root: str | None = None
