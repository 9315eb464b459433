"""Tests for last-modified providers."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from docsync.timestamps import (
    CachedProvider,
    FallbackProvider,
    FilesystemProvider,
    Found,
    GitHistoryProvider,
    LastModifiedProvider,
    Unavailable,
)
from tests._fixtures.tree_builder import BASE_EPOCH, TreeBuilder


class _CountingProvider(LastModifiedProvider):
    def __init__(self, result) -> None:  # type: ignore[no-untyped-def]
        self.result = result
        self.calls = 0

    def last_modified(self, path):  # type: ignore[no-untyped-def]
        self.calls += 1
        return self.result


def test_git_provider_uses_commit_time(tmp_path: Path) -> None:
    calls: list[tuple[list[str], Path]] = []

    def runner(args, *, cwd):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd)))
        return "1700000000\n"

    target = tmp_path / "src" / "users.ts"
    result = GitHistoryProvider(runner=runner).last_modified(target)

    assert result == Found(instant=1700000000.0, source="git")
    assert calls == [(["git", "log", "-1", "--format=%ct", "--", "users.ts"], tmp_path / "src")]


def test_git_provider_reports_untracked_files(tmp_path: Path) -> None:
    result = GitHistoryProvider(runner=lambda args, *, cwd: "").last_modified(tmp_path / "a.ts")

    assert isinstance(result, Unavailable)


def test_git_provider_handles_command_failure(tmp_path: Path) -> None:
    def runner(args, *, cwd):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(128, args, stderr="not a git repository")

    result = GitHistoryProvider(runner=runner).last_modified(tmp_path / "a.ts")

    assert isinstance(result, Unavailable)
    assert "git lookup failed" in result.reason


def test_git_provider_handles_missing_binary(tmp_path: Path) -> None:
    def runner(args, *, cwd):  # type: ignore[no-untyped-def]
        raise FileNotFoundError("git")

    assert isinstance(GitHistoryProvider(runner=runner).last_modified(tmp_path), Unavailable)


def test_git_provider_rejects_garbage_output(tmp_path: Path) -> None:
    result = GitHistoryProvider(runner=lambda args, *, cwd: "yesterday").last_modified(tmp_path)

    assert isinstance(result, Unavailable)


def test_filesystem_provider_reads_mtime(tree: TreeBuilder) -> None:
    tree.write({"a.ts": ""})
    tree.touch_day("a.ts", 1)

    result = FilesystemProvider().last_modified(tree.path("a.ts"))

    assert isinstance(result, Found)
    assert result.instant == pytest.approx(BASE_EPOCH + 86400)
    assert result.portable is False


def test_filesystem_provider_missing_file(tmp_path: Path) -> None:
    assert isinstance(FilesystemProvider().last_modified(tmp_path / "gone.ts"), Unavailable)


def test_fallback_provider_uses_first_found(tmp_path: Path) -> None:
    first = _CountingProvider(Unavailable("untracked"))
    second = _CountingProvider(Found(5.0, "filesystem"))
    third = _CountingProvider(Found(9.0, "filesystem"))

    result = FallbackProvider(first, second, third).last_modified(tmp_path)

    assert result == Found(5.0, "filesystem")
    assert (first.calls, second.calls, third.calls) == (1, 1, 0)


def test_fallback_provider_joins_reasons(tmp_path: Path) -> None:
    provider = FallbackProvider(_CountingProvider(Unavailable("a")), _CountingProvider(Unavailable("b")))

    result = provider.last_modified(tmp_path)

    assert result == Unavailable("a; b")


def test_fallback_provider_requires_providers() -> None:
    with pytest.raises(ValueError):
        FallbackProvider()


def test_cached_provider_memoises_until_cleared(tmp_path: Path) -> None:
    inner = _CountingProvider(Found(1.0, "git"))
    cached = CachedProvider(inner)

    cached.last_modified(tmp_path / "a.ts")
    cached.last_modified(tmp_path / "a.ts")
    assert inner.calls == 1

    cached.clear()
    cached.last_modified(tmp_path / "a.ts")
    assert inner.calls == 2
