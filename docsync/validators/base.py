"""Core validation data structures and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple

from ..errors import MalformedContent
from ..frontmatter import ParsedDocument, parse_document
from ..models import DocArtifact, ValidationIssue


@dataclass
class ValidationOptions:
    """Flags controlling which checks run and how strictly."""

    strict: bool = False
    check_links: bool = True
    check_code_examples: bool = True
    max_workers: int = 4


@dataclass
class FencedBlock:
    """A fenced code block; line numbers are 1-based within the file."""

    start_line: int
    end_line: Optional[int]
    info: str
    lines: List[str] = field(default_factory=list)

    @property
    def language(self) -> Optional[str]:
        token = self.info.split(maxsplit=1)[0] if self.info.strip() else ""
        token = token.split("{", 1)[0]
        return token or None

    @property
    def closed(self) -> bool:
        return self.end_line is not None


@dataclass
class DocumentContext:
    """A document prepared once and shared by every check."""

    artifact: DocArtifact
    docs_root: Path
    options: ValidationOptions
    parsed: Optional[ParsedDocument] = None
    parse_error: Optional[str] = None
    lines: List[str] = field(default_factory=list)
    blocks: List[FencedBlock] = field(default_factory=list)

    @property
    def file(self) -> str:
        return self.artifact.path

    def issue(
        self, kind: str, message: str, severity: str, line: Optional[int] = None
    ) -> ValidationIssue:
        return ValidationIssue(
            file=self.artifact.path, kind=kind, message=message, severity=severity, line=line
        )

    def prose_lines(self) -> Iterator[Tuple[int, str]]:
        """Yield ``(line_number, text)`` for body lines outside fenced code."""
        fenced = set()
        for block in self.blocks:
            end = block.end_line if block.end_line is not None else len(self.lines)
            fenced.update(range(block.start_line, end + 1))
        start = self.parsed.body_offset if self.parsed is not None else 0
        for index in range(start, len(self.lines)):
            number = index + 1
            if number not in fenced:
                yield number, self.lines[index]


class DocumentCheck(Protocol):
    """Protocol implemented by per-document checks."""

    name: str

    def check(self, context: DocumentContext) -> List[ValidationIssue]:
        """Run the check and return any issues."""


def prepare_context(
    artifact: DocArtifact, docs_root: Path, options: ValidationOptions
) -> DocumentContext:
    """Parse frontmatter and locate fenced blocks for ``artifact``."""
    context = DocumentContext(artifact=artifact, docs_root=docs_root, options=options)
    if artifact.raw_content is None:
        context.parse_error = artifact.read_error or "File is not readable as text"
        return context

    context.lines = artifact.raw_content.splitlines()
    try:
        context.parsed = parse_document(artifact.raw_content)
    except MalformedContent as exc:
        context.parse_error = str(exc)
    body_start = context.parsed.body_offset if context.parsed is not None else 0
    context.blocks = scan_fences(context.lines, start=body_start)
    return context


def scan_fences(lines: Sequence[str], start: int = 0) -> List[FencedBlock]:
    """Locate ``` and ~~~ fenced blocks, including an unterminated trailing one."""
    blocks: List[FencedBlock] = []
    current: Optional[FencedBlock] = None
    marker = ""
    for index in range(start, len(lines)):
        stripped = lines[index].strip()
        if current is None:
            opener = _fence_marker(stripped)
            if opener:
                marker = opener
                current = FencedBlock(
                    start_line=index + 1, end_line=None, info=stripped[len(opener):].strip()
                )
            continue
        closer = _fence_marker(stripped)
        if closer and closer[0] == marker[0] and len(closer) >= len(marker) and stripped == closer:
            current.end_line = index + 1
            blocks.append(current)
            current = None
            continue
        current.lines.append(lines[index])
    if current is not None:
        blocks.append(current)
    return blocks


def _fence_marker(stripped: str) -> str:
    for char in ("`", "~"):
        if stripped.startswith(char * 3):
            length = len(stripped) - len(stripped.lstrip(char))
            return char * length
    return ""


__all__ = [
    "DocumentCheck",
    "DocumentContext",
    "FencedBlock",
    "ValidationOptions",
    "prepare_context",
    "scan_fences",
]
