"""Services module - Business logic layer"""

from .code_modifier import CodeModifier
from .code_rewriter import CodeRewriter
from .config_manager import ConfigManager
from .content_resolver import ContentResolver
from .git_repository import RepositoryHandle
from .llm_service import LLMService
from .tracked_files import list_tracked_files

__all__ = [
    "CodeModifier",
    "CodeRewriter",
    "ConfigManager",
    "ContentResolver",
    "LLMService",
    "RepositoryHandle",
    "list_tracked_files",
]
