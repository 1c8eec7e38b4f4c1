"""Code modification data models"""

from __future__ import annotations

from pydantic import BaseModel


class ModificationRequest(BaseModel):
    """Rewrite a line range of one file according to an instruction.

    Lines are 0-indexed and ``line_end`` is exclusive; a negative
    ``line_end`` means "through the end of the file".
    """

    path: str
    instruction: str
    line_start: int = 0
    line_end: int = -1


class ModificationResult(BaseModel):
    """Outcome of a modification request (nothing is written to disk)"""

    explanation: str
    modified_files: list[str]
    modified_code: str = ""
