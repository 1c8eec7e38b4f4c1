"""
Code Modifier - Rewrite a line range of a file through the code rewriter
"""

from __future__ import annotations

import logging
import posixpath

from fastapi.concurrency import run_in_threadpool

from models.modification import ModificationRequest, ModificationResult

from .content_resolver import ContentResolver

logger = logging.getLogger(__name__)


def resolve_line_range(line_count: int, line_start: int, line_end: int) -> tuple[int, int]:
    """Clamp a requested [start, end) range to the file.

    A negative end selects through the last line; a start past the end of
    the file yields an empty range rather than an error.
    """
    start = min(max(line_start, 0), line_count)
    if line_end < 0:
        end = line_count
    else:
        end = min(max(line_end, start), line_count)
    return start, end


def language_hint(path: str) -> str:
    """File extension including the dot, e.g. '.py'; empty when there is none"""
    return posixpath.splitext(path)[1]


class CodeModifier:
    """Modification pipeline: select lines, rewrite them, explain the rewrite.

    ``rewriter`` provides ``rewrite(language, code, instruction)`` and
    ``explain(instruction, modification)`` coroutines. Its errors propagate
    unchanged so each failure is reported on the request that caused it.
    """

    def __init__(self, resolver: ContentResolver, rewriter, explain: bool = True):
        self.resolver = resolver
        self.rewriter = rewriter
        self.explain = explain

    async def modify(self, request: ModificationRequest) -> ModificationResult:
        content = await run_in_threadpool(self.resolver.get_current, request.path)

        lines = content.decode("utf-8", errors="replace").split("\n")
        start, end = resolve_line_range(len(lines), request.line_start, request.line_end)
        code = "\n".join(lines[start:end])
        language = language_hint(request.path)

        logger.info(
            "Modifying %s lines [%d, %d) of %d: %s",
            request.path, start, end, len(lines), request.instruction,
        )

        modified_code = await self.rewriter.rewrite(language, code, request.instruction)

        explanation = ""
        if self.explain:
            explanation = await self.rewriter.explain(request.instruction, modified_code)

        return ModificationResult(
            explanation=explanation,
            modified_files=[request.path],
            modified_code=modified_code,
        )
