"""Project resolution: owning project, git metadata and privacy for a file."""

import logging
import os
import re

from codepulse.services.git_inspector import GitInspector, default_git_inspector
from codepulse.types import ProjectInfo
from codepulse.utils.paths import find_upward

logger = logging.getLogger(__name__)

VCS_MARKER = ".git"
PROJECT_CONFIG_FILE = ".codepulse"

_PROJECT_RE = re.compile(r"""^\s*project\s*[=:]\s*["']?([^"'\r\n]*?)["']?\s*$""", re.MULTILINE)
_PRIVATE_RE = re.compile(r"^\s*private\s*[=:]\s*[\"']?(\w+)", re.MULTILINE)
_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0")


class ProjectResolver:
    """Resolves and caches ProjectInfo per containing directory.

    Cache entries live for the resolver's lifetime: edits to a .codepulse
    file are not picked up until invalidate() is called.
    """

    def __init__(self, git: GitInspector | None = None):
        self._git = git if git is not None else default_git_inspector()
        self._cache: dict[str, ProjectInfo] = {}

    def resolve(self, filepath: str) -> ProjectInfo:
        directory = os.path.dirname(os.path.abspath(filepath))
        cached = self._cache.get(directory)
        if cached is not None:
            return cached

        info = self._resolve_directory(directory)
        self._cache[directory] = info
        logger.debug("Resolved %s -> %s", directory, info)
        return info

    def invalidate(self, path: str | None = None):
        """Drop cached entries for a directory (or file's directory), or all of them."""
        if path is None:
            self._cache.clear()
            return
        directory = path if os.path.isdir(path) else os.path.dirname(os.path.abspath(path))
        self._cache.pop(os.path.abspath(directory), None)

    def _resolve_directory(self, directory: str) -> ProjectInfo:
        vcs_root = find_upward(directory, VCS_MARKER)

        name = None
        private = False
        config_dir = find_upward(directory, PROJECT_CONFIG_FILE, stop_dir=vcs_root)
        if config_dir is not None:
            name, private = read_project_config(os.path.join(config_dir, PROJECT_CONFIG_FILE))

        if not name:
            name = os.path.basename(vcs_root or directory) or directory

        remote = branch = None
        if vcs_root is not None:
            remote = self._git.remote_url(vcs_root)
            branch = self._git.current_branch(vcs_root)

        return ProjectInfo(
            project=name,
            git_remote=remote,
            git_branch=branch,
            private=private,
            vcs_root=vcs_root,
        )


def read_project_config(config_path: str) -> tuple[str | None, bool]:
    """Extract (project name, private flag) from a .codepulse file.

    Missing or unreadable files give (None, False).
    """
    try:
        with open(config_path, encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError:
        logger.debug("Cannot read project config %s", config_path, exc_info=True)
        return None, False

    name = None
    match = _PROJECT_RE.search(text)
    if match:
        name = match.group(1).strip() or None

    private = False
    match = _PRIVATE_RE.search(text)
    if match:
        value = match.group(1).lower()
        if value in _TRUE_VALUES:
            private = True
        elif value not in _FALSE_VALUES:
            logger.debug("Ignoring private value %r in %s", value, config_path)

    return name, private
