"""Structural linting for fenced code examples. No code is executed."""

from __future__ import annotations

from typing import List

from .base import DocumentContext
from ..models import ValidationIssue


class CodeBlockCheck:
    """Flags fences without a language, empty fences and unterminated fences."""

    name = "code_blocks"

    def check(self, context: DocumentContext) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for block in context.blocks:
            if not block.closed:
                issues.append(
                    context.issue(
                        "unclosed_code_block",
                        "Code block is never closed",
                        "warning",
                        line=block.start_line,
                    )
                )
            if block.language is None:
                issues.append(
                    context.issue(
                        "missing_code_language",
                        "Code block missing language specifier",
                        "warning",
                        line=block.start_line,
                    )
                )
            if not "".join(block.lines).strip():
                issues.append(
                    context.issue(
                        "empty_code_block",
                        "Empty code block found",
                        "warning",
                        line=block.start_line,
                    )
                )
        return issues


__all__ = ["CodeBlockCheck"]
