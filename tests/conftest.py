from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Callable

import pytest

from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture
def tree(tmp_path: Path) -> TreeBuilder:
    """Provide a reusable project tree builder rooted at the pytest tmp_path."""
    return TreeBuilder(tmp_path)


@pytest.fixture
def deny_listing(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Make ``os.scandir`` fail with EACCES for the given directories.

    Unlike chmod, this also denies access when the suite runs as root.
    """
    denied: set[Path] = set()
    real_scandir = os.scandir

    def _scandir(path=".", *args, **kwargs):  # type: ignore[no-untyped-def]
        if Path(os.fspath(path)).resolve() in denied:
            raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
        return real_scandir(path, *args, **kwargs)

    monkeypatch.setattr(os, "scandir", _scandir)

    def _deny(*paths: Path) -> None:
        denied.update(path.resolve() for path in paths)

    return _deny
