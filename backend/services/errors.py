"""
Error taxonomy for repository access and code modification.

Every error carries the HTTP status the API reports it with; the exception
handler in main.py does the translation.
"""

from __future__ import annotations


class EditorBackendError(Exception):
    """Base class for errors reported back to the editor client"""

    status_code = 500


class RepositoryOpenError(EditorBackendError):
    """The configured root is not an openable git working tree"""


class RepositoryReadError(EditorBackendError):
    """Walking the working tree or querying git failed mid-operation"""


class FileNotFound(EditorBackendError):
    """Path is absent from the working tree"""

    status_code = 404


class PathNotInHistory(EditorBackendError):
    """Path cannot be resolved in the HEAD commit's tree"""

    status_code = 409


class CollaboratorError(EditorBackendError):
    """Transport, auth or quota failure talking to the LLM provider"""

    status_code = 502

    def __init__(self, message: str, provider: str | None = None, http_status: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.http_status = http_status


class NoCompletionReceived(CollaboratorError):
    """The provider answered but returned zero choices"""
