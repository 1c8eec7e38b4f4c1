"""Shared FastAPI dependencies and service wiring"""

from __future__ import annotations

from typing import Any

from fastapi import Request

from services.code_modifier import CodeModifier
from services.code_rewriter import CodeRewriter
from services.config_manager import ConfigManager
from services.content_resolver import ContentResolver


def install_services(state, config: dict[str, Any], rewriter=None):
    """Build the per-app services from configuration.

    ``rewriter`` overrides the LLM-backed CodeRewriter, e.g. with a fake.
    """
    root = config.get("repository", {}).get("root", ".")
    state.repository_root = root
    state.resolver = ContentResolver(root)
    install_rewriter(state, config, rewriter)


def install_rewriter(state, config: dict[str, Any], rewriter=None):
    state.rewriter = rewriter or CodeRewriter.from_config(config)
    state.modifier = CodeModifier(
        state.resolver,
        state.rewriter,
        explain=config.get("modification", {}).get("explain", True),
    )


def get_repository_root(request: Request) -> str:
    return request.app.state.repository_root


def get_resolver(request: Request) -> ContentResolver:
    return request.app.state.resolver


def get_modifier(request: Request) -> CodeModifier:
    return request.app.state.modifier


def get_config_manager(request: Request) -> ConfigManager:
    return request.app.state.config_manager
