"""Repository state data models"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class FileState(str, Enum):
    """Working-tree state of a single file"""

    UNMODIFIED = "unmodified"
    ADDED = "added"
    COPIED = "copied"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    UPDATED_BUT_UNMERGED = "updated_but_unmerged"


@dataclass(frozen=True)
class FileSnapshot:
    """Current and reference bytes for one path.

    ``reference`` is the HEAD blob for changed files and the current bytes
    for unmodified ones.
    """

    path: str
    current: bytes
    reference: bytes
    state: FileState


class FileList(BaseModel):
    """Tracked files relative to the repository root"""

    files: list[str]


class FileRequest(BaseModel):
    """Request naming a single file"""

    filename: str


class FileDetails(BaseModel):
    """Current content, last committed content and state of a file"""

    content: str
    original: str
    state: FileState

    @classmethod
    def from_snapshot(cls, snapshot: FileSnapshot) -> "FileDetails":
        return cls(
            content=snapshot.current.decode("utf-8", errors="replace"),
            original=snapshot.reference.decode("utf-8", errors="replace"),
            state=snapshot.state,
        )
