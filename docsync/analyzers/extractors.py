"""Filename and path heuristics for API and component inventories."""

from __future__ import annotations

import codecs
import re
from pathlib import Path, PurePosixPath
from typing import FrozenSet, Optional

from .base import ArtifactExtractor, Definition
from ..errors import ParseHeuristicFailure
from ..models import APIDefinition, ComponentDefinition, SourceArtifact

_FASTAPI_DECORATOR = re.compile(r"@(\w+)\.(get|post|put|delete|patch)\((['\"])([^'\"]+)\3")
_EXPRESS_ROUTE = re.compile(r"(app|router)\.(get|post|put|delete|patch)\((['\"])([^'\"]+)\3")
_DECLARATION = re.compile(
    r"^\s*(?:export\s+(?:default\s+)?)?(?:async\s+)?"
    r"(?:def|function|class|func|fn|pub\s+fn|const)\s+\w+[^\n]*",
    re.MULTILINE,
)

_SAMPLE_BYTES = 64 * 1024
_BINARY_PROBE = 8192


def read_text_sample(path: Path) -> str:
    """Read the head of a text file, rejecting binary-looking or unreadable files."""
    try:
        with path.open("rb") as handle:
            raw = handle.read(_SAMPLE_BYTES)
    except OSError as exc:
        raise ParseHeuristicFailure(f"{path}: {exc}") from exc
    if b"\x00" in raw[:_BINARY_PROBE]:
        raise ParseHeuristicFailure(f"{path}: looks binary")
    # A truncated sample may end mid-character; the incremental decoder tolerates that.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        return decoder.decode(raw, final=len(raw) < _SAMPLE_BYTES)
    except UnicodeDecodeError as exc:
        raise ParseHeuristicFailure(f"{path}: not UTF-8 text") from exc


def artifact_name(path: str) -> str:
    """Display name for a file: its stem, or the parent directory for index files."""
    pure = PurePosixPath(path)
    stem = pure.stem
    if stem.lower() == "index" and pure.parent.name:
        return pure.parent.name
    return stem


def _directory_segments(path: str) -> FrozenSet[str]:
    return frozenset(part.lower() for part in PurePosixPath(path).parts[:-1])


def _first_declaration(text: str) -> Optional[str]:
    match = _DECLARATION.search(text)
    if not match:
        return None
    return match.group(0).strip().rstrip("{:").strip()


class ApiPathExtractor(ArtifactExtractor):
    """Treats files under api/route/endpoint directories as API modules."""

    name = "api"
    category = "api"
    SEGMENTS = frozenset({"api", "apis", "route", "routes", "endpoint", "endpoints"})

    def matches(self, artifact: SourceArtifact) -> bool:
        return artifact.language is not None and bool(
            self.SEGMENTS & _directory_segments(artifact.path)
        )

    def extract(self, root: Path, artifact: SourceArtifact) -> Optional[Definition]:
        text = read_text_sample(root / artifact.path)
        route = _FASTAPI_DECORATOR.search(text) or _EXPRESS_ROUTE.search(text)
        if route:
            _, method, _, path = route.groups()
            return APIDefinition(
                name=artifact_name(artifact.path),
                kind="endpoint",
                source_file=artifact.path,
                signature=f"{method.upper()} {path}",
            )
        return APIDefinition(
            name=artifact_name(artifact.path),
            kind="module",
            source_file=artifact.path,
            signature=_first_declaration(text),
        )


class ComponentPathExtractor(ArtifactExtractor):
    """Treats UI-framework files and files under component directories as components."""

    name = "component"
    category = "component"
    EXTENSIONS = frozenset({".tsx", ".jsx", ".vue", ".svelte"})
    SEGMENTS = frozenset({"component", "components"})

    def matches(self, artifact: SourceArtifact) -> bool:
        if artifact.extension in self.EXTENSIONS:
            return True
        return artifact.language is not None and bool(
            self.SEGMENTS & _directory_segments(artifact.path)
        )

    def extract(self, root: Path, artifact: SourceArtifact) -> Optional[Definition]:
        text = read_text_sample(root / artifact.path)
        return ComponentDefinition(
            name=artifact_name(artifact.path),
            kind="component",
            source_file=artifact.path,
            signature=_first_declaration(text),
        )


__all__ = [
    "ApiPathExtractor",
    "ComponentPathExtractor",
    "artifact_name",
    "read_text_sample",
]
