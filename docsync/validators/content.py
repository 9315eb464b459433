"""Heuristic content checks that only ever warn."""

from __future__ import annotations

import re
from typing import List

from .base import DocumentContext
from ..models import ValidationIssue

_EMPTY_ALT_IMAGE = re.compile(r"!\[\s*\]\([^)]+\)")

NON_PORTABLE_URLS = (
    "http://localhost",
    "https://localhost",
    "http://127.0.0.1",
    "https://docs.example.com",
)


class ContentCheck:
    """Warns about images without alt text and absolute URLs to internal hosts."""

    name = "content"

    def check(self, context: DocumentContext) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for number, line in context.prose_lines():
            if _EMPTY_ALT_IMAGE.search(line):
                issues.append(
                    context.issue(
                        "missing_alt_text", "Image found without alt text", "warning", line=number
                    )
                )
            if any(url in line for url in NON_PORTABLE_URLS):
                issues.append(
                    context.issue(
                        "absolute_internal_url",
                        "Consider using relative paths for internal links",
                        "warning",
                        line=number,
                    )
                )
        return issues


__all__ = ["ContentCheck", "NON_PORTABLE_URLS"]
