"""Configuration API endpoints"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from services.config_manager import ConfigManager
from services.errors import CollaboratorError
from services.llm_service import LLMService

from .deps import get_config_manager, install_rewriter

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    provider: str | None = None
    openai: dict | None = None
    gemini: dict | None = None
    vllm: dict | None = None
    modification: dict | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    provider: str
    openai: dict
    gemini: dict
    vllm: dict
    modification: dict
    repository: dict


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str
    provider: str


def mask_key(key: str) -> str:
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


@router.get("", response_model=ConfigResponse)
async def get_config(config_manager: ConfigManager = Depends(get_config_manager)) -> ConfigResponse:
    """Get current configuration with API keys masked"""
    config = config_manager.get_config()

    providers = {}
    for name in ("openai", "gemini", "vllm"):
        section = config.get(name, {}).copy()
        section["apiKey"] = mask_key(section.get("apiKey", ""))
        providers[name] = section

    return ConfigResponse(
        provider=config.get("provider", "openai"),
        modification=config.get("modification", {}),
        repository=config.get("repository", {}),
        **providers,
    )


@router.put("")
async def update_config(
    update: ConfigUpdateRequest,
    request: Request,
    config_manager: ConfigManager = Depends(get_config_manager),
) -> dict[str, Any]:
    """Update provider settings; the code rewriter is rebuilt from the result"""
    config_manager.save_config(update.model_dump(exclude_none=True))

    config = config_manager.get_config()
    install_rewriter(request.app.state, config)
    logger.info("Configuration updated, provider is now %s", config.get("provider"))

    return {"status": "success", "message": "Configuration updated"}


@router.post("/validate", response_model=ValidateResponse)
async def validate_config(config_manager: ConfigManager = Depends(get_config_manager)) -> ValidateResponse:
    """Validate current configuration by testing LLM connection"""
    config = config_manager.get_config()
    provider = config.get("provider", "openai")

    try:
        response = await LLMService(config).generate_response("Say 'OK' if you can hear me.", max_tokens=10)
    except CollaboratorError as e:
        return ValidateResponse(valid=False, message=f"Connection failed: {e}", provider=provider)

    if not response:
        return ValidateResponse(valid=False, message="Received empty response from LLM", provider=provider)

    return ValidateResponse(valid=True, message=f"Successfully connected to {provider}", provider=provider)
