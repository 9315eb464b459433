"""Error taxonomy shared by docsync passes."""

from __future__ import annotations


class DocSyncError(RuntimeError):
    """Base class for errors raised by docsync."""


class PathNotFound(DocSyncError, FileNotFoundError):
    """Raised when a configured root path does not exist. Aborts the pass."""

    def __init__(self, path: object, label: str = "Path") -> None:
        super().__init__(f"{label} not found: {path}")
        self.path = str(path)


class PermissionDenied(DocSyncError, PermissionError):
    """A directory could not be read.

    Below a root the directory is skipped and recorded. For the root itself
    the pass aborts.
    """

    def __init__(self, path: object, reason: str = "permission denied") -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = str(path)
        self.reason = reason


class MalformedContent(DocSyncError):
    """Document content could not be interpreted (bad encoding, bad frontmatter)."""


class ParseHeuristicFailure(DocSyncError):
    """A best-effort heuristic could not inspect a file."""


class OperationCancelled(DocSyncError):
    """Raised when a caller-supplied cancel event fires mid-walk."""


class ConfigError(DocSyncError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ConfigError",
    "DocSyncError",
    "MalformedContent",
    "OperationCancelled",
    "ParseHeuristicFailure",
    "PathNotFound",
    "PermissionDenied",
]
