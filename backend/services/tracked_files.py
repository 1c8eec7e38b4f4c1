"""
Tracked Files - Ignore-aware listing of the working tree
"""

from __future__ import annotations

import logging
import os

from .git_repository import GIT_DIR_NAME, RepositoryHandle

logger = logging.getLogger(__name__)


def _ancestors(path: str) -> list[str]:
    """'a/b/c.txt' -> ['a', 'a/b']"""
    parts = path.split("/")[:-1]
    return ["/".join(parts[: i + 1]) for i in range(len(parts))]


def list_tracked_files(root: str | os.PathLike) -> list[str]:
    """List every file under root that is neither git metadata nor ignored.

    The whole tree is walked before filtering, so a directory that cannot be
    read fails the call instead of producing a partial listing.
    """
    with RepositoryHandle.open(root) as handle:
        files, directories = handle.list_tree()
        ignored = handle.ignored(directories + files)

    tracked = []
    for path in files:
        if path.split("/", 1)[0] == GIT_DIR_NAME:
            continue
        if path in ignored or any(parent in ignored for parent in _ancestors(path)):
            continue
        tracked.append(path)

    logger.info("Listed %d tracked files (%d ignored entries) under %s", len(tracked), len(ignored), root)
    return sorted(tracked)
