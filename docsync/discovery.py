"""File discovery and artifact loading for source and documentation trees."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence

from .analyzers.language import detect_language
from .errors import MalformedContent, OperationCancelled, PathNotFound, PermissionDenied
from .frontmatter import parse_document, stringify_frontmatter
from .logging import get_logger
from .models import DocArtifact, SourceArtifact
from .timestamps import Found, LastModifiedProvider

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.git/**",
    "**/venv/**",
    "**/.venv/**",
    "**/__pycache__/**",
    "**/*.min.js",
    "**/.next/**",
)

SOURCE_PATTERNS: tuple[str, ...] = (
    "**/*.ts",
    "**/*.tsx",
    "**/*.js",
    "**/*.jsx",
    "**/*.py",
    "**/*.go",
    "**/*.rs",
    "**/*.java",
)

DOC_PATTERNS: tuple[str, ...] = ("**/*.md", "**/*.mdx")

_LOGGER = get_logger("discovery")


def glob_matches(path: str, pattern: str) -> bool:
    """Return True when the POSIX relative ``path`` matches ``pattern``.

    ``*`` may cross directory separators (``fnmatch`` semantics), a leading
    ``**/`` also matches at the root, and a trailing ``/**`` matches the
    directory itself and anything below it.
    """
    normalized = path.replace("\\", "/")
    if fnmatchcase(normalized, pattern):
        return True
    if pattern.startswith("**/"):
        return glob_matches(normalized, pattern[3:])
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        if normalized == prefix or normalized.startswith(f"{prefix}/"):
            return True
        return fnmatchcase(normalized, prefix) or fnmatchcase(normalized, f"{prefix}/*")
    return False


@dataclass
class DiscoveryResult:
    """Relative paths discovered under ``root``.

    ``skipped`` holds one :class:`PermissionDenied` per subdirectory the walk
    could not enter; its ``path`` is relative to ``root``.
    """

    root: str
    paths: List[str] = field(default_factory=list)
    skipped: List[PermissionDenied] = field(default_factory=list)


class FileDiscovery:
    """Walks a root directory applying include and exclude globs."""

    def __init__(
        self,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        self.include = list(include) if include else list(SOURCE_PATTERNS)
        self.exclude = list(DEFAULT_EXCLUDES) + [p for p in exclude or () if p]
        self._cancel = cancel

    def discover(self, root: str | Path) -> DiscoveryResult:
        """Return matching relative paths, ordered by first matching include pattern."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise PathNotFound(root, "Root directory")

        skipped: List[PermissionDenied] = []
        candidates = list(self._iter_files(root_path, skipped))

        seen: set[str] = set()
        paths: List[str] = []
        for pattern in self.include:
            for rel_path in candidates:
                if rel_path in seen or not glob_matches(rel_path, pattern):
                    continue
                seen.add(rel_path)
                paths.append(rel_path)

        _LOGGER.debug(
            "Discovered %d of %d files under %s", len(paths), len(candidates), root_path
        )
        return DiscoveryResult(root=str(root_path), paths=paths, skipped=skipped)

    def _iter_files(self, root: Path, skipped: List[PermissionDenied]) -> Iterator[str]:
        def _on_error(exc: OSError) -> None:
            location = Path(exc.filename) if exc.filename else root
            reason = exc.strerror or str(exc)
            if location == root:
                raise PermissionDenied(root, reason) from exc
            _LOGGER.warning("Skipping unreadable directory %s: %s", location, reason)
            skipped.append(PermissionDenied(_relative(root, location), reason))

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._is_excluded(f"{rel_path}/"):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                self._check_cancelled()
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._is_excluded(rel_path):
                    continue
                yield rel_path

    def _is_excluded(self, rel_path: str) -> bool:
        return any(glob_matches(rel_path, pattern) for pattern in self.exclude)

    def _check_cancelled(self) -> None:
        if self._cancel is not None and self._cancel.is_set():
            raise OperationCancelled("Discovery cancelled")


def _relative(root: Path, location: Path) -> str:
    try:
        return location.relative_to(root).as_posix()
    except ValueError:
        return str(location)


def load_source_artifacts(
    root: str | Path,
    paths: Sequence[str],
    provider: LastModifiedProvider,
    *,
    max_workers: int = 4,
) -> List[SourceArtifact]:
    """Build source artifacts for ``paths`` (relative to ``root``), preserving order."""
    root_path = Path(root)

    def _build(rel_path: str) -> SourceArtifact:
        suffix = Path(rel_path).suffix.lower()
        instant, source = _lookup(provider, root_path / rel_path)
        return SourceArtifact(
            path=rel_path,
            extension=suffix,
            language=detect_language(rel_path),
            last_modified=instant,
            timestamp_source=source,
        )

    return _map_ordered(_build, paths, max_workers)


def load_doc_artifacts(
    root: str | Path,
    paths: Sequence[str],
    provider: LastModifiedProvider,
    *,
    max_workers: int = 4,
) -> List[DocArtifact]:
    """Build documentation artifacts, reading content and frontmatter.

    Files that cannot be decoded still yield an artifact with ``read_error``
    set; malformed frontmatter leaves ``frontmatter`` empty.
    """
    root_path = Path(root)

    def _build(rel_path: str) -> DocArtifact:
        file_path = root_path / rel_path
        instant, source = _lookup(provider, file_path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning("Could not read %s as text: %s", rel_path, exc)
            return DocArtifact(
                path=rel_path,
                last_modified=instant,
                timestamp_source=source,
                read_error=f"File is not readable as text: {exc}",
            )
        frontmatter = {}
        try:
            frontmatter = stringify_frontmatter(parse_document(content).data)
        except MalformedContent as exc:
            # Left for the validator to report; the artifact keeps its content.
            _LOGGER.debug("Frontmatter in %s not parsed: %s", rel_path, exc)
        return DocArtifact(
            path=rel_path,
            last_modified=instant,
            frontmatter=frontmatter,
            raw_content=content,
            timestamp_source=source,
        )

    return _map_ordered(_build, paths, max_workers)


def _lookup(provider: LastModifiedProvider, path: Path) -> tuple[Optional[float], Optional[str]]:
    result = provider.last_modified(path)
    if isinstance(result, Found):
        return result.instant, result.source
    return None, None


def _map_ordered(func: Callable[[str], object], items: Sequence[str], max_workers: int) -> list:
    if max_workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="docsync-load") as pool:
        return list(pool.map(func, items))


__all__ = [
    "DEFAULT_EXCLUDES",
    "DOC_PATTERNS",
    "DiscoveryResult",
    "FileDiscovery",
    "SOURCE_PATTERNS",
    "glob_matches",
    "load_doc_artifacts",
    "load_source_artifacts",
]
