"""Git metadata inspectors: remote URL and current branch for a repository root."""

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT_S = 2.0


class GitInspector:
    """Capability for reading remote and branch of the repository at `root`.

    Both methods return None when the value is unavailable; they never raise.
    """

    def remote_url(self, root: str) -> str | None:
        raise NotImplementedError

    def current_branch(self, root: str) -> str | None:
        raise NotImplementedError


class SubprocessGitInspector(GitInspector):
    """Shells out to the git executable."""

    def __init__(self, git_executable: str = "git", timeout: float = GIT_TIMEOUT_S):
        self._git = git_executable
        self._timeout = timeout

    def remote_url(self, root: str) -> str | None:
        return self._run(root, "config", "--get", "remote.origin.url")

    def current_branch(self, root: str) -> str | None:
        return self._run(root, "rev-parse", "--abbrev-ref", "HEAD")

    def _run(self, root: str, *args: str) -> str | None:
        try:
            result = subprocess.run(
                [self._git, "-C", root, *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.SubprocessError):
            logger.debug("git %s failed in %s", " ".join(args), root, exc_info=True)
            return None
        if result.returncode != 0:
            return None
        output = result.stdout.strip()
        return output or None


class FileGitInspector(GitInspector):
    """Reads .git/HEAD and .git/config directly, without a git binary.

    Handles both regular repos and worktrees (.git as file with gitdir pointer).
    """

    def remote_url(self, root: str) -> str | None:
        git_path = Path(root) / ".git"
        try:
            if git_path.is_file():
                gitdir = _read_gitdir(git_path)
                if gitdir is None:
                    return None
                # For worktrees, the main repo config is at the parent
                config_path = gitdir.parent.parent / "config"
                if not config_path.exists():
                    config_path = gitdir / "config"
            else:
                config_path = git_path / "config"

            if not config_path.exists():
                return None
            return _parse_remote_url(config_path.read_text())
        except (OSError, ValueError):
            logger.debug("Failed to resolve remote for %s", root, exc_info=True)
            return None

    def current_branch(self, root: str) -> str | None:
        git_path = Path(root) / ".git"
        try:
            if git_path.is_file():
                gitdir = _read_gitdir(git_path)
                if gitdir is None:
                    return None
                head_path = gitdir / "HEAD"
            else:
                head_path = git_path / "HEAD"

            if not head_path.exists():
                return None

            head = head_path.read_text().strip()
            if head.startswith("ref: refs/heads/"):
                return head[len("ref: refs/heads/"):] or None
            # Detached HEAD: short hash
            return head[:8] or None
        except (OSError, ValueError):
            logger.debug("Failed to resolve git branch for %s", root, exc_info=True)
            return None


def default_git_inspector() -> GitInspector:
    """Subprocess inspector when git is installed, file reader otherwise."""
    if shutil.which("git"):
        return SubprocessGitInspector()
    return FileGitInspector()


def _read_gitdir(git_file: Path) -> Path | None:
    content = git_file.read_text().strip()
    if not content.startswith("gitdir:"):
        return None
    return Path(content[len("gitdir:"):].strip())


def _parse_remote_url(config_text: str) -> str | None:
    """Parse the origin remote URL from git config text."""
    in_origin = False
    for line in config_text.splitlines():
        stripped = line.strip()
        if stripped == '[remote "origin"]':
            in_origin = True
            continue
        if in_origin:
            if stripped.startswith("["):
                break
            key, sep, value = stripped.partition("=")
            if sep and key.strip() == "url":
                return value.strip() or None
    return None
