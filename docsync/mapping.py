"""Positional path mapping between source and documentation trees."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath

_DOC_SUFFIXES = (".mdx", ".md")


class PathMapper(ABC):
    """Maps root-relative paths between the source and docs trees.

    Both directions work on paths relative to their own root, so swapping the
    root prefixes is implicit.
    """

    @abstractmethod
    def doc_to_source(self, doc_path: str) -> str:
        """Return the source path a documentation page is expected to describe."""

    @abstractmethod
    def source_to_doc(self, source_path: str) -> str:
        """Return the documentation path expected for a source file."""


class MirroredPathMapper(PathMapper):
    """Assumes the docs tree mirrors the source tree file for file.

    ``docs/api/users.mdx`` maps to ``src/api/users.ts`` and back. Layouts that
    do not mirror each other under- or over-report drift; no fuzzy matching is
    attempted.
    """

    def __init__(self, source_extension: str = ".ts", doc_extension: str = ".mdx") -> None:
        self.source_extension = _dotted(source_extension)
        self.doc_extension = _dotted(doc_extension)

    def doc_to_source(self, doc_path: str) -> str:
        return _swap_suffix(doc_path, self.source_extension, only=_DOC_SUFFIXES)

    def source_to_doc(self, source_path: str) -> str:
        return _swap_suffix(source_path, self.doc_extension)


def _dotted(extension: str) -> str:
    return extension if extension.startswith(".") else f".{extension}"


def _swap_suffix(path: str, suffix: str, only: tuple[str, ...] | None = None) -> str:
    pure = PurePosixPath(path.replace("\\", "/"))
    if only is not None and pure.suffix.lower() not in only:
        return pure.as_posix()
    if not pure.suffix:
        return f"{pure.as_posix()}{suffix}"
    return pure.with_suffix(suffix).as_posix()


__all__ = ["MirroredPathMapper", "PathMapper"]
