"""Frontmatter completeness checks."""

from __future__ import annotations

from typing import List

from .base import DocumentContext
from ..models import ValidationIssue

REQUIRED_FIELDS = ("title",)
RECOMMENDED_FIELDS = ("description",)


class FrontmatterCheck:
    """Requires a parseable frontmatter block with a title (and, in strict mode, a description)."""

    name = "frontmatter"

    def check(self, context: DocumentContext) -> List[ValidationIssue]:
        if context.parse_error is not None or context.parsed is None:
            return [
                context.issue(
                    "invalid_frontmatter",
                    f"Invalid frontmatter: {context.parse_error}",
                    "error",
                    line=1,
                )
            ]

        data = context.parsed.data
        issues: List[ValidationIssue] = []
        for key in REQUIRED_FIELDS:
            if not _present(data.get(key)):
                issues.append(
                    context.issue(
                        "missing_frontmatter",
                        f"Missing required frontmatter field: {key}",
                        "error",
                    )
                )
        for key in RECOMMENDED_FIELDS:
            if not _present(data.get(key)):
                issues.append(
                    context.issue(
                        "missing_frontmatter",
                        f"Missing recommended frontmatter field: {key}",
                        "error" if context.options.strict else "warning",
                    )
                )
        return issues


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


__all__ = ["FrontmatterCheck"]
