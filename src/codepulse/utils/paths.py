"""Filesystem walking helpers used by project resolution."""

import os


def find_upward(start_dir: str, name: str, stop_dir: str | None = None) -> str | None:
    """Return the directory closest to start_dir that contains `name`.

    Walks parent directories until the filesystem root, or until stop_dir
    has been checked when given.
    """
    current = os.path.abspath(start_dir)
    stop = os.path.abspath(stop_dir) if stop_dir else None
    while True:
        if os.path.exists(os.path.join(current, name)):
            return current
        if stop is not None and current == stop:
            return None
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def display_filename(filepath: str, root: str | None = None) -> str:
    """Path relative to root when the file lives under it, else the bare name."""
    if root:
        root = os.path.abspath(root)
        path = os.path.abspath(filepath)
        if path.startswith(root + os.sep):
            return os.path.relpath(path, root).replace(os.sep, "/")
    return os.path.basename(filepath)
