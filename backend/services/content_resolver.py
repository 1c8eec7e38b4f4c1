"""
Content Resolver - Serve working-tree and last-committed bytes for a file
"""

from __future__ import annotations

import logging
import os

from models.repository import FileSnapshot, FileState

from .errors import FileNotFound
from .file_state import get_file_state
from .git_repository import RepositoryHandle, normalize_path

logger = logging.getLogger(__name__)


class ContentResolver:
    """Read file content from a repository root.

    Every call opens its own repository handle, so one resolver can be
    shared freely between concurrent requests.
    """

    def __init__(self, root: str | os.PathLike):
        self.root = root

    def _open(self) -> RepositoryHandle:
        return RepositoryHandle.open(self.root)

    @staticmethod
    def _clean(path: str) -> str:
        cleaned = normalize_path(path)
        if not cleaned:
            raise FileNotFound(f"invalid file path: {path!r}")
        return cleaned

    def get_current(self, path: str) -> bytes:
        """Bytes of the file as it is on disk right now"""
        with self._open() as handle:
            path = self._clean(path)
            return handle.read_working_file(path)

    def get_historical(self, path: str) -> bytes:
        """Bytes of the file as of the HEAD commit"""
        with self._open() as handle:
            path = self._clean(path)
            return handle.head_blob(path)

    def get_state(self, path: str) -> FileState:
        with self._open() as handle:
            path = self._clean(path)
            return get_file_state(handle, path)

    def get_snapshot(self, path: str) -> FileSnapshot:
        """Current content plus the version to compare it against.

        The HEAD blob is only looked up for files git reports as changed;
        unmodified files use their current bytes as the reference.
        """
        with self._open() as handle:
            path = self._clean(path)
            current = handle.read_working_file(path)
            state = get_file_state(handle, path)
            if state == FileState.UNMODIFIED:
                reference = current
            else:
                logger.debug("Fetching HEAD blob for %s (%s)", path, state.value)
                reference = handle.head_blob(path)

        return FileSnapshot(path=path, current=current, reference=reference, state=state)
