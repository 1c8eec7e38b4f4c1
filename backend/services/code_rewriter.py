"""
Code Rewriter - The rewrite/explain contract used by the modification pipeline

Anything with the same two coroutine methods can stand in for it, which is
how tests substitute a fake.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .llm_service import LLMService

logger = logging.getLogger(__name__)

REWRITE_SYSTEM_PROMPT = (
    "You are a code editing assistant. You rewrite the code you are given "
    "exactly as instructed and return only the resulting code."
)


def build_rewrite_prompt(language: str, code: str, instruction: str) -> str:
    """Build prompt asking for the code rewritten per the instruction"""
    fence = language.lstrip(".")
    language_name = fence or "plain text"

    return f"""Rewrite the following {language_name} code according to the instruction.

INSTRUCTION:
{instruction}

CODE:
```{fence}
{code}
```

Return ONLY the rewritten code wrapped in ```{fence} ... ```, no explanations."""


def build_explanation_prompt(instruction: str, modification: str) -> str:
    return f"Modified Code:\n{modification}\n\nPrompt:\n{instruction}\n\nReasoning:"


def extract_code(response: str) -> str:
    """Pull the code out of a fenced block, or return the response as is"""
    code_match = re.search(r"```[\w.+#-]*\n([\s\S]*?)```", response)
    if code_match:
        return code_match.group(1)
    return response


class CodeRewriter:
    """Rewrites code and explains rewrites through an LLMService"""

    def __init__(
        self,
        llm: LLMService,
        temperature: float = 0.8,
        max_tokens: int = 2048,
        explanation_max_tokens: int = 100,
    ):
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.explanation_max_tokens = explanation_max_tokens

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "CodeRewriter":
        modification = config.get("modification", {})
        return cls(
            LLMService(config),
            temperature=modification.get("temperature", 0.8),
            max_tokens=modification.get("maxTokens", 2048),
            explanation_max_tokens=modification.get("explanationMaxTokens", 100),
        )

    async def rewrite(self, language: str, code: str, instruction: str) -> str:
        logger.info("Requesting edits (%s, %d chars): %s", language or "no extension", len(code), instruction)
        response = await self.llm.generate_response(
            build_rewrite_prompt(language, code, instruction),
            system=REWRITE_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return extract_code(response)

    async def explain(self, instruction: str, modification: str) -> str:
        response = await self.llm.generate_response(
            build_explanation_prompt(instruction, modification),
            max_tokens=self.explanation_max_tokens,
            temperature=self.temperature,
        )
        return response.strip()
