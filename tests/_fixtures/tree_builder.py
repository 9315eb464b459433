"""Helper utilities for constructing temporary source and docs trees in tests."""

from __future__ import annotations

import os
import textwrap
from pathlib import Path
from typing import Mapping

from docsync.sync import SECONDS_PER_DAY

# Fixed epoch so day arithmetic in tests is exact.
BASE_EPOCH = 1_700_000_000.0


class TreeBuilder:
    """Writes files under a throwaway project root and pins their mtimes."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def touch_day(self, relative: str, day: float) -> None:
        """Set the file's mtime to ``day`` whole days after the fixed epoch."""
        stamp = BASE_EPOCH + day * SECONDS_PER_DAY
        os.utime(self.root / relative, (stamp, stamp))

    def path(self, relative: str = "") -> Path:
        return self.root / relative if relative else self.root


__all__ = ["BASE_EPOCH", "TreeBuilder"]
