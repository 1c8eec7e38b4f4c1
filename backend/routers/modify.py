"""Code modification API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from models.modification import ModificationRequest, ModificationResult
from services.code_modifier import CodeModifier

from .deps import get_modifier

router = APIRouter()


@router.post("", response_model=ModificationResult)
async def modify_code(
    request: ModificationRequest,
    modifier: CodeModifier = Depends(get_modifier),
) -> ModificationResult:
    """Rewrite a line range of a file and explain the change"""
    return await modifier.modify(request)
