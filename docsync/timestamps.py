"""Last-modified lookups backed by git history or filesystem metadata."""

from __future__ import annotations

import shutil
import subprocess
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Union

from .logging import get_logger

_LOGGER = get_logger("timestamps")


@dataclass(frozen=True)
class Found:
    """A modification instant in epoch seconds and where it came from."""

    instant: float
    source: str

    @property
    def portable(self) -> bool:
        """True when the instant is reproducible across clones (commit time)."""
        return self.source == "git"


@dataclass(frozen=True)
class Unavailable:
    """No instant could be determined."""

    reason: str


LookupResult = Union[Found, Unavailable]


class LastModifiedProvider(ABC):
    """Capability returning the logical modification instant for a path."""

    @abstractmethod
    def last_modified(self, path: Path) -> LookupResult:
        """Return :class:`Found` or :class:`Unavailable`; never raise for lookup failures."""


class GitHistoryProvider(LastModifiedProvider):
    """Uses the commit time of the most recent commit touching the path."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def last_modified(self, path: Path) -> LookupResult:
        path = Path(path)
        args = ["git", "log", "-1", "--format=%ct", "--", path.name]
        try:
            output = self._runner(args, cwd=path.parent)
        except (OSError, subprocess.CalledProcessError) as exc:
            return Unavailable(f"git lookup failed: {exc}")
        stamp = output.strip()
        if not stamp:
            return Unavailable("no commits touch this path")
        try:
            return Found(instant=float(int(stamp)), source="git")
        except ValueError:
            return Unavailable(f"unexpected git output: {stamp!r}")

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


class FilesystemProvider(LastModifiedProvider):
    """Uses filesystem mtimes. Not portable across checkouts."""

    def last_modified(self, path: Path) -> LookupResult:
        try:
            return Found(instant=Path(path).stat().st_mtime, source="filesystem")
        except OSError as exc:
            return Unavailable(f"stat failed: {exc}")


class FallbackProvider(LastModifiedProvider):
    """Asks each provider in turn; the first :class:`Found` wins."""

    def __init__(self, *providers: LastModifiedProvider) -> None:
        if not providers:
            raise ValueError("FallbackProvider needs at least one provider")
        self.providers = list(providers)

    def last_modified(self, path: Path) -> LookupResult:
        reasons = []
        for provider in self.providers:
            result = provider.last_modified(path)
            if isinstance(result, Found):
                return result
            reasons.append(result.reason)
        return Unavailable("; ".join(reasons))


class CachedProvider(LastModifiedProvider):
    """Memoises another provider for the lifetime of this object."""

    def __init__(self, inner: LastModifiedProvider) -> None:
        self.inner = inner
        self._entries: Dict[str, LookupResult] = {}
        self._lock = threading.Lock()

    def last_modified(self, path: Path) -> LookupResult:
        key = str(Path(path).resolve())
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached
        result = self.inner.last_modified(path)
        with self._lock:
            self._entries.setdefault(key, result)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def default_provider() -> LastModifiedProvider:
    """Git history with filesystem fallback when git is installed, else filesystem only."""
    if shutil.which("git") is None:
        _LOGGER.debug("git not found on PATH; using filesystem mtimes")
        return FilesystemProvider()
    return FallbackProvider(GitHistoryProvider(), FilesystemProvider())


__all__ = [
    "CachedProvider",
    "FallbackProvider",
    "FilesystemProvider",
    "Found",
    "GitHistoryProvider",
    "LastModifiedProvider",
    "LookupResult",
    "Unavailable",
    "default_provider",
]
