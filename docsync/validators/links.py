"""Internal link resolution against the documentation tree."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import List, Optional

from .base import DocumentContext
from ..models import ValidationIssue

_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_INLINE_CODE = re.compile(r"`[^`]*`")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")

RESOLUTION_SUFFIXES = ("", ".mdx", ".md", "/index.mdx")


class LinkCheck:
    """Ensures relative and root-absolute links point at existing pages."""

    name = "links"

    def check(self, context: DocumentContext) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for number, line in context.prose_lines():
            for match in _LINK_PATTERN.finditer(_INLINE_CODE.sub("", line)):
                target = _clean_target(match.group(2))
                if target is None:
                    continue
                if not _resolves(context.docs_root, context.file, target):
                    issues.append(
                        context.issue(
                            "broken_link",
                            f"Broken internal link: {match.group(2).strip()}",
                            "error",
                            line=number,
                        )
                    )
        return issues


def is_external(target: str) -> bool:
    return bool(_SCHEME.match(target)) or target.startswith("//")


def _clean_target(raw: str) -> Optional[str]:
    """Return the filesystem part of a link target, or None when it needs no check."""
    target = raw.strip()
    if target.startswith("<") and ">" in target:
        target = target[1 : target.index(">")]
    else:
        target = target.split(maxsplit=1)[0] if target else ""
    if not target or target.startswith("#") or is_external(target):
        return None
    target = target.split("#", 1)[0].split("?", 1)[0]
    return target or None


def _resolves(docs_root: Path, file: str, target: str) -> bool:
    """True when ``target`` names an existing page inside ``docs_root``."""
    normalized = target.replace("\\", "/")
    if normalized.startswith("/"):
        base = docs_root / normalized.lstrip("/")
    else:
        base = docs_root / PurePosixPath(file).parent / normalized
    root = docs_root.resolve()
    base_text = str(base).rstrip("/\\")
    for suffix in RESOLUTION_SUFFIXES:
        candidate = Path(f"{base_text}{suffix}").resolve()
        if candidate.is_relative_to(root) and candidate.exists():
            return True
    return False



__all__ = ["LinkCheck", "RESOLUTION_SUFFIXES", "is_external"]
