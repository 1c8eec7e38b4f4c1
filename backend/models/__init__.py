"""Models module - Pydantic data models"""

from .repository import FileDetails, FileList, FileRequest, FileSnapshot, FileState
from .modification import ModificationRequest, ModificationResult

__all__ = [
    # Repository models
    "FileDetails",
    "FileList",
    "FileRequest",
    "FileSnapshot",
    "FileState",
    # Modification models
    "ModificationRequest",
    "ModificationResult",
]
