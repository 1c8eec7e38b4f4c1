"""
Status Classifier - Map git's working-tree status codes onto FileState
"""

from __future__ import annotations

import logging

from models.repository import FileState

from .git_repository import RepositoryHandle

logger = logging.getLogger(__name__)

STATUS_CODE_STATES: dict[str, FileState] = {
    "A": FileState.ADDED,
    "C": FileState.COPIED,
    "D": FileState.DELETED,
    "M": FileState.MODIFIED,
    "R": FileState.RENAMED,
    "U": FileState.UPDATED_BUT_UNMERGED,
}


def classify_status_code(code: str) -> FileState:
    """Clean, untracked, ignored and unknown codes all count as unmodified"""
    return STATUS_CODE_STATES.get(code, FileState.UNMODIFIED)


def get_file_state(handle: RepositoryHandle, path: str) -> FileState:
    """Query live status for exactly one path"""
    code = handle.status(path)
    state = classify_status_code(code)
    logger.debug("Status of %s: %r -> %s", path, code, state.value)
    return state
